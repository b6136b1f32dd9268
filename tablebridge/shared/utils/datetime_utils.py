"""
Utilidades puras para manejo de fechas.

Se mantienen libres de I/O para poder testearlas fácilmente.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

# Fraccion de segundos seguida de offset o fin de string
_FRACTION_RE = re.compile(r"\.(\d+)(?=([+-]\d{2}:?\d{2})?$)")


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    Los datetime naive se asumen en UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_timestamp(raw: str) -> Optional[datetime]:
    """
    Parsea un timestamp ISO8601 (acepta sufijo 'Z').

    La fraccion de segundos se lleva a 6 digitos: PostgREST emite entre 1 y 6
    y `fromisoformat` solo acepta 3 o 6 antes de Python 3.11.

    Returns:
        datetime aware en UTC, o None si el string no es ISO8601
    """
    try:
        text = str(raw).strip().replace("Z", "+00:00")
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    return ensure_utc(dt)


def to_naive_utc(dt: datetime) -> datetime:
    """
    Convierte a UTC y elimina la zona horaria.

    El destino guarda DATETIME sin zona: la pérdida de tz es intencional.
    """
    return ensure_utc(dt).replace(tzinfo=None)


def file_timestamp(dt: Optional[datetime] = None) -> str:
    """Timestamp compacto para nombres de archivo (YYYYmmdd_HHMMSS)."""
    return (dt or utc_now()).strftime("%Y%m%d_%H%M%S")
