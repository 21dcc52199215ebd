from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Erro de domínio convertido em resposta HTTP estruturada pelo handler central."""

    kind = "error"
    status_code = 400

    def __init__(
        self,
        message: str,
        *,
        fields: list[dict[str, str]] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or []
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.kind, "detail": self.message}
        if self.fields:
            body["fields"] = self.fields
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    kind = "validation_error"
    status_code = 422

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, fields=[{"field": field, "message": message}])


class NotFoundError(AppError):
    kind = "not_found"
    status_code = 404


class LinkExpiredError(AppError):
    kind = "link_expired"
    status_code = 410


class AuthenticationError(AppError):
    kind = "authentication_error"
    status_code = 401


class AccessDeniedError(AppError):
    kind = "access_denied"
    status_code = 403


class AuthorizationRequiredError(AppError):
    """O contrato só pode ser assinado depois do termo de autorização."""

    kind = "authorization_required"
    status_code = 409


class AlreadySignedError(AppError):
    kind = "already_signed"
    status_code = 409


class ConflictError(AppError):
    kind = "conflict"
    status_code = 409


class PaymentProviderError(AppError):
    """Falha do provedor de cobrança, com a mensagem original quando disponível."""

    kind = "payment_provider_error"
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        provider_status: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.provider_status = provider_status
