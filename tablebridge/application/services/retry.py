"""
Reintento con backoff exponencial.
"""
import time
from typing import Callable, Optional, TypeVar

from loguru import logger


T = TypeVar("T")


class RetryExhaustedError(RuntimeError):
    """Se agotaron los intentos; `cause` es el último error."""

    def __init__(self, attempts: int, cause: Exception):
        super().__init__(f"Falló tras {attempts} intentos: {cause}")
        self.attempts = attempts
        self.cause = cause


def backoff_delay(attempt: int, base_delay_s: float) -> float:
    """Espera tras el intento fallido número `attempt` (1-based): base * 2^(attempt-1)."""
    return base_delay_s * (2 ** (attempt - 1))


def retry_with_backoff(
    fn: Callable[[], T],
    *,
    max_attempts: int,
    base_delay_s: float,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[int, Exception], None]] = None,
    label: str = "operación",
) -> T:
    """
    Ejecuta `fn` hasta `max_attempts` veces.

    Cada intento fallido que deja otro intento por delante llama a `on_retry`
    y duerme base * 2^(attempt-1).

    Raises:
        RetryExhaustedError: si fallan todos los intentos
    """
    last_error: Optional[Exception] = None
    for attempt in range(1, max_attempts + 1):
        try:
            return fn()
        except Exception as e:
            last_error = e
            if attempt == max_attempts:
                break
            delay = backoff_delay(attempt, base_delay_s)
            logger.warning(
                f"{label}: intento {attempt}/{max_attempts} falló ({e}); reintentando en {delay:.1f}s"
            )
            if on_retry is not None:
                on_retry(attempt, e)
            sleep(delay)

    raise RetryExhaustedError(max_attempts, last_error)
