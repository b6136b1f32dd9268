"""
Raíz de los errores de tablebridge que llegan al API o al CLI.

Los errores de fila y de tabla NO usan esta jerarquía: se acumulan en el
RunReporter y nunca cortan la corrida.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Error con código HTTP y código estable para el cliente.

    El CLI solo muestra `message`; el API responde con `to_response()`.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Cuerpo JSON de la respuesta HTTP."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }
