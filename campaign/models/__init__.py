"""ORM models."""

from campaign.models.audit_log import AuditLog
from campaign.models.client import Client
from campaign.models.draw_number import DrawNumber
from campaign.models.game_opportunity import GameOpportunity
from campaign.models.invoice import Invoice
from campaign.models.page_content import PageContent
from campaign.models.product import Product
from campaign.models.user import Role, User, user_roles
from campaign.models.voucher import Voucher

__all__ = [
    "AuditLog",
    "Client",
    "DrawNumber",
    "GameOpportunity",
    "Invoice",
    "PageContent",
    "Product",
    "Role",
    "User",
    "Voucher",
    "user_roles",
]
