"""Transactional e-mail over SMTP.

Bodies are Jinja templates under ``templates/emails``. With
``MAIL_SUPPRESS_SEND`` the message is logged and kept in ``outbox``
instead of being delivered.
"""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Mapping
from email.message import EmailMessage
from typing import Any

from flask import render_template

from campaign.errors import EmailDeliveryError
from campaign.models.voucher import Voucher
from campaign.utils.dates import format_br_date

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(
        self,
        *,
        host: str = "localhost",
        port: int = 587,
        use_ssl: bool = False,
        username: str = "",
        password: str = "",
        suppress_send: bool = False,
        campaign_name: str = "Campanha",
        frontend_base_url: str = "",
        timeout: float = 15.0,
    ) -> None:
        self._host = host
        self._port = port
        self._use_ssl = use_ssl
        self._username = username
        self._password = password
        self._suppress_send = suppress_send
        self._timeout = timeout
        self.campaign_name = campaign_name
        self.frontend_base_url = frontend_base_url.rstrip("/")
        self.outbox: list[EmailMessage] = []

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "EmailService":
        return cls(
            host=str(config.get("MAIL_HOST") or "localhost"),
            port=int(config.get("MAIL_PORT") or 587),
            use_ssl=bool(config.get("MAIL_USE_SSL")),
            username=str(config.get("MAIL_USERNAME") or ""),
            password=str(config.get("MAIL_PASSWORD") or ""),
            suppress_send=bool(config.get("MAIL_SUPPRESS_SEND")),
            campaign_name=str(config.get("CAMPAIGN_NAME") or "Campanha"),
            frontend_base_url=str(config.get("FRONTEND_BASE_URL") or ""),
        )

    def send(self, to: str, subject: str, template: str, **context: Any) -> EmailMessage:
        """Render ``emails/<template>`` and deliver it. Needs an app context."""

        html = render_template(
            f"emails/{template}",
            campaign_name=self.campaign_name,
            frontend_base_url=self.frontend_base_url,
            **context,
        )

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = f"{self.campaign_name} <{self._username or 'no-reply@localhost'}>"
        message["To"] = to
        message.set_content("Este e-mail requer um cliente com suporte a HTML.")
        message.add_alternative(html, subtype="html")

        if self._suppress_send:
            logger.info("Mail suppressed: to=%s subject=%r", to, subject)
            self.outbox.append(message)
            return message

        smtp_cls = smtplib.SMTP_SSL if self._use_ssl else smtplib.SMTP
        try:
            with smtp_cls(self._host, self._port, timeout=self._timeout) as smtp:
                if not self._use_ssl:
                    smtp.ehlo()
                    if smtp.has_extn("starttls"):
                        smtp.starttls()
                        smtp.ehlo()
                if self._username:
                    smtp.login(self._username, self._password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception("Failed to send e-mail to %s", to)
            raise EmailDeliveryError() from exc

        logger.info("E-mail sent: to=%s subject=%r", to, subject)
        return message

    def send_security_email(self, to: str, name: str, link_token: str) -> EmailMessage:
        return self.send(
            to,
            "Autorização de novo dispositivo",
            "security_authorization.html",
            name=name,
            link=f"{self.frontend_base_url}/autorizar-dispositivo?token={link_token}",
        )

    def send_welcome_email(self, to: str, name: str) -> EmailMessage:
        return self.send(to, f"Bem-vindo(a) à {self.campaign_name}", "welcome.html", name=name)

    def send_voucher_winner_email(
        self, to: str, name: str, coupom: str, voucher: Voucher | None = None
    ) -> EmailMessage:
        return self.send(
            to,
            "Você ganhou um voucher!",
            "email_voucher.html",
            name=name,
            coupom=coupom,
            voucher_value=voucher.voucher_value if voucher is not None else None,
            draw_date=format_br_date(voucher.draw_date) if voucher is not None else None,
        )

    def send_adjustment_voucher_email(self, to: str, name: str, coupom: str | None = None) -> EmailMessage:
        return self.send(to, "Ajuste no seu voucher", "adjustment_voucher.html", name=name, coupom=coupom)

    def send_draw_email(self, to: str, name: str, number: str | None = None) -> EmailMessage:
        return self.send(
            to,
            "Seu número foi sorteado!",
            "draw.html",
            name=name,
            number=number,
        )
