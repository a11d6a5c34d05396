"""Promotional campaign Flask application package."""

from __future__ import annotations

from dotenv import load_dotenv
from flask import Flask


def create_app(config_object: object | None = None) -> Flask:
    """Application factory.

    Args:
        config_object: Optional config class/object overriding the one
            selected by ``APP_ENV`` (used by tests).

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from flask_cors import CORS

    from campaign.config import get_config
    from campaign.db import init_db
    from campaign.error_handlers import register_error_handlers
    from campaign.logging_config import configure_logging
    from campaign.routes.auth import auth_bp
    from campaign.routes.clients import clients_bp
    from campaign.routes.draw_numbers import draw_numbers_bp
    from campaign.routes.emails import emails_bp
    from campaign.routes.health import health_bp
    from campaign.routes.invoices import invoices_bp
    from campaign.routes.opportunities import opportunities_bp
    from campaign.routes.pages import pages_bp
    from campaign.routes.products import products_bp
    from campaign.routes.protected import protected_bp
    from campaign.routes.users import users_bp
    from campaign.routes.vouchers import vouchers_bp
    from campaign.services.email_service import EmailService
    from campaign.services.sales_api import SalesApiClient

    app = Flask(__name__)
    app.config.from_object(config_object or get_config())

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    origins = list(app.config.get("CORS_ALLOWED_ORIGINS") or ())
    CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

    app.extensions["sales_api"] = SalesApiClient.from_config(app.config)
    app.extensions["email_service"] = EmailService.from_config(app.config)

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(clients_bp, url_prefix="/api/clients")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(invoices_bp, url_prefix="/api/invoices")
    app.register_blueprint(opportunities_bp, url_prefix="/api/opportunities")
    app.register_blueprint(draw_numbers_bp, url_prefix="/api/draw-numbers")
    app.register_blueprint(pages_bp, url_prefix="/api/pages-content")
    app.register_blueprint(products_bp, url_prefix="/api/products")
    app.register_blueprint(vouchers_bp, url_prefix="/api/vouchers")
    app.register_blueprint(emails_bp, url_prefix="/api/emails")
    app.register_blueprint(protected_bp, url_prefix="/api/protected")

    return app
