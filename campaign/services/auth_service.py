"""Authentication use-cases: back-office users and web client device binding."""

from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from campaign.db import atomic
from campaign.errors import ConflictError, ForbiddenError, UnauthorizedError, ValidationError
from campaign.models.base import utcnow
from campaign.models.client import Client
from campaign.models.user import User
from campaign.repositories.client_repository import ClientRepository
from campaign.repositories.user_repository import UserRepository
from campaign.services.audit_service import log_activity
from campaign.services.email_service import EmailService
from campaign.utils.dates import expiration_timestamp, parse_duration
from campaign.utils.strings import decode_base64_to_array, encode_array_to_base64

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"
LINK_TOKEN_LIFETIME = "15m"


def new_client_token() -> str:
    return secrets.token_hex(32)


class AuthService:
    def __init__(
        self,
        email_service: EmailService | None = None,
        email_cooldown: str = "15m",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._email = email_service
        self._cooldown: timedelta = parse_duration(email_cooldown)
        self._clock = clock
        self._users = UserRepository()
        self._clients = ClientRepository()

    # -- back-office users -------------------------------------------------

    def register_user(
        self, session: Session, *, username: str, email: str, password: str, role: str = DEFAULT_ROLE
    ) -> User:
        if self._users.email_or_username_taken(session, email, username):
            raise ConflictError("Email ou nome de usuário já existente.")

        role_row = self._users.get_role(session, role)
        if role_row is None:
            raise ValidationError(f"O papel '{role}' não foi encontrado.")

        user = self._users.create(
            session,
            username=username,
            email=email,
            password=generate_password_hash(password),
            roles=[role_row],
        )
        logger.info("User %s registered with role %s", user.id, role)
        return user

    def authenticate(self, session: Session, *, email: str, password: str) -> User:
        user = self._users.get_by_email(session, email)
        # Same message for unknown e-mail and wrong password.
        if user is None or not check_password_hash(user.password, password):
            raise UnauthorizedError("Credenciais inválidas.")
        return user

    # -- web clients -------------------------------------------------------

    def web_login(self, session: Session, *, cpf: str, security_token: str) -> Client:
        """Bind the client to one device.

        Raises ``ForbiddenError`` after e-mailing an authorization link when
        the device differs from the registered one.
        """

        client = self._clients.get_by_cpf(session, cpf)
        if client is None:
            client = self._clients.create(
                session,
                is_pre_register=True,
                cpf=cpf,
                security_token=security_token,
                token=new_client_token(),
            )
            logger.info("Pre-registered client %s on first web login", client.id)
            return client

        if not client.security_token:
            client.security_token = security_token
            session.flush()
            return client

        if client.security_token == security_token:
            return client

        now = self._clock()
        sent_at = client.security_token_email_sended_at
        if sent_at is not None and sent_at + self._cooldown > now:
            raise ValidationError(
                "Você já deve ter recebido o e-mail de autorização. Verifique na caixa de SPAM."
            )

        if not client.email or self._email is None:
            raise ForbiddenError("Dispositivo diferente do cadastrado e não há e-mail para autorização.")

        link_token = encode_array_to_base64(
            [client.token, client.security_token, security_token, expiration_timestamp(LINK_TOKEN_LIFETIME)]
        )
        self._email.send_security_email(client.email, client.name or "", link_token)

        # Persist the stamp even though the request ends in 403.
        with atomic(session):
            client.security_token_email_sended_at = now

        raise ForbiddenError(
            "Você está tentando acessar através de um dispositivo diferente do de cadastro. "
            "Foi enviado um e-mail para que você autorize o acesso através do novo dispositivo."
        )

    def update_security_token(self, session: Session, link_token: str) -> Client:
        data = decode_base64_to_array(link_token)
        if len(data) < 4:
            raise ValidationError("Parâmetro no formato não esperado.")

        client_token, old_security, new_security, expires_at = data[:4]
        try:
            expired = int(expires_at) < int(time.time())
        except (TypeError, ValueError) as exc:
            raise ValidationError("Parâmetro no formato não esperado.") from exc
        if expired:
            raise ValidationError("Token expirado.")

        client = self._clients.get_by_token(session, str(client_token))
        if client is None or client.security_token != old_security:
            raise ValidationError("Cliente não encontrado.")

        client.security_token = str(new_security)
        client.updated_security_token_at = self._clock()
        log_activity(
            session,
            None,
            "UPDATE_SECURITY_TOKEN",
            "clients",
            client.id,
            {"old_security_token": old_security, "new_security_token": new_security},
        )
        session.flush()
        return client
