"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Dados inválidos.", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class UnauthorizedError(AppError):
    """Missing or invalid credentials."""

    def __init__(self, message: str = "Credenciais inválidas.", details: Any | None = None) -> None:
        super().__init__(code="unauthorized", message=message, status_code=401, details=details)


class ForbiddenError(AppError):
    """Authenticated but not allowed."""

    def __init__(self, message: str = "Acesso negado.", details: Any | None = None) -> None:
        super().__init__(code="forbidden", message=message, status_code=403, details=details)


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Não encontrado.", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class NoOpportunityError(NotFoundError):
    """Client has no active, unused game opportunity."""

    def __init__(self, message: str = "Nenhuma oportunidade de jogo disponível.") -> None:
        super().__init__(message=message, details={"win": False})
        self.code = "no_opportunity"


class ConflictError(AppError):
    """Conflict (e.g., unique constraint)."""

    def __init__(self, message: str = "Registro já existente.", details: Any | None = None) -> None:
        super().__init__(code="conflict", message=message, status_code=409, details=details)


class UpstreamError(AppError):
    """External sales API unreachable or returned something unusable."""

    def __init__(self, message: str = "Não foi possível validar a nota fiscal no momento.") -> None:
        super().__init__(code="upstream_error", message=message, status_code=502)


class EmailDeliveryError(AppError):
    """SMTP delivery failed."""

    def __init__(self, message: str = "Falha no serviço de envio de e-mail.") -> None:
        super().__init__(code="email_error", message=message, status_code=502)


class DrawNumberExhaustedError(AppError):
    """No free draw number found within the retry budget."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            code="draw_numbers_exhausted",
            message=f"Failed to generate a unique draw number within retry limit ({attempts})",
            status_code=503,
        )
