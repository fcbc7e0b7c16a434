# errors.py
from __future__ import annotations


class GatewayError(Exception):
    """Fallo al hablar con el backend. Cada subclase indica su tipo."""

    kind = "upstream"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """Entrada inválida detectada antes de cualquier petición de red."""

    kind = "validation"
    status_code = 400


class NoDataError(GatewayError):
    """El backend responde, pero el dispositivo aún no ha enviado lecturas."""

    kind = "no_data"
    status_code = 404


class UpstreamError(GatewayError):
    """Backend inaccesible o respuesta no-2xx inesperada."""

    kind = "upstream"
    status_code = 500
