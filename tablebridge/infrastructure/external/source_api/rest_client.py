"""
Cliente mínimo de la API REST de origen (PostgREST / Supabase, sin SDKs externos).

Requisitos cubiertos:
- requests
- paginación por offset/limit
- conteo exacto vía Content-Range
- upsert con on_conflict (lado mirror de la sync continua)

No reintenta internamente: los reintentos son responsabilidad del orquestador.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

import requests

from tablebridge.shared.exceptions.domain import ConfigurationException


@dataclass(frozen=True)
class SourceCredentials:
    base_url: str
    service_key: str


class SourceApiError(RuntimeError):
    """Error de integración con la API REST de origen."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


_CONTENT_RANGE_RE = re.compile(r"^(?:\d+-\d+|\*)/(\d+|\*)$")


def parse_content_range_total(header: Optional[str]) -> int:
    """
    Extrae el total de un header Content-Range ("0-24/3573" o "*/0").

    Raises:
        SourceApiError: si el header falta o no trae total
    """
    match = _CONTENT_RANGE_RE.match((header or "").strip())
    if not match or match.group(1) == "*":
        raise SourceApiError(f"Content-Range sin total exacto: {header!r}")
    return int(match.group(1))


class SourceApiClient:
    """
    Cliente HTTP del origen REST.

    Importante:
    - No hace cast de tipos: los valores llegan tal cual los serializa la API.
    - Cualquier status fuera de 2xx se convierte en SourceApiError.
    """

    def __init__(
        self,
        credentials: SourceCredentials,
        *,
        session: Optional[requests.Session] = None,
        rest_path: str = "/rest/v1",
        timeout_s: int = 30,
    ) -> None:
        self._creds = credentials
        self._base_url = credentials.base_url.rstrip("/") + rest_path
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    def fetch_page(
        self,
        table: str,
        offset: int,
        limit: int,
        *,
        order: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """
        Trae una página de filas [offset, offset + limit).

        Args:
            order: orden PostgREST opcional (ej: "id.asc") para paginar de forma estable
        """
        query: list[tuple[str, Any]] = [
            ("select", "*"),
            ("offset", offset),
            ("limit", limit),
        ]
        if order:
            query.append(("order", order))

        resp = self._request("GET", f"{self._base_url}/{table}", query=query)
        payload = resp.json()
        if not isinstance(payload, list):
            raise SourceApiError(f"Respuesta inesperada para '{table}': se esperaba una lista")
        return payload

    def fetch_count(self, table: str) -> int:
        """Conteo exacto de filas de una tabla."""
        resp = self._request(
            "HEAD",
            f"{self._base_url}/{table}",
            query=[("select", "*")],
            extra_headers={"Prefer": "count=exact", "Range-Unit": "items"},
        )
        return parse_content_range_total(resp.headers.get("Content-Range"))

    def upsert_rows(self, table: str, rows: list[dict[str, Any]], *, on_conflict: str) -> int:
        """
        Insert-or-replace por clave de conflicto.

        Returns:
            número de filas enviadas
        """
        if not rows:
            return 0
        # default=str cubre datetime/Decimal que vienen del lado SQL
        body = json.dumps(rows, default=str)
        self._request(
            "POST",
            f"{self._base_url}/{table}",
            query=[("on_conflict", on_conflict)],
            extra_headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            data=body,
        )
        return len(rows)

    def ping(self) -> dict[str, Any]:
        """
        Sonda de conectividad: pide la descripción OpenAPI del root REST.
        """
        resp = self._request("GET", f"{self._base_url}/", query=[])
        details: dict[str, Any] = {"connection": "active", "mode": "mirror"}
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            definitions = payload.get("definitions") or payload.get("paths") or {}
            details["tables"] = len([k for k in definitions if k.strip("/")])
        return details

    def _request(
        self,
        method: str,
        url: str,
        *,
        query: list[tuple[str, Any]],
        extra_headers: Optional[dict[str, str]] = None,
        data: Optional[str] = None,
    ) -> requests.Response:
        headers = {
            "apikey": self._creds.service_key,
            "Authorization": f"Bearer {self._creds.service_key}",
            "Content-Type": "application/json",
        }
        if extra_headers:
            headers.update(extra_headers)

        try:
            resp = self._session.request(
                method=method,
                url=url,
                params=query,
                headers=headers,
                data=data,
                timeout=self._timeout_s,
            )
        except requests.RequestException as e:
            raise SourceApiError(f"Request {method} {url} falló: {e}") from e

        if 200 <= resp.status_code < 300:
            return resp

        raise SourceApiError(
            f"API de origen respondió {resp.status_code}: {resp.text}",
            status_code=resp.status_code,
        )


def build_from_settings(config) -> SourceApiClient:
    """
    Construye el cliente desde Settings (SOURCE_URL / SOURCE_SERVICE_KEY / SOURCE_TIMEOUT_S).

    Raises:
        ConfigurationException: si falta la URL o la key
    """
    missing = [name for name in ("SOURCE_URL", "SOURCE_SERVICE_KEY") if not getattr(config, name)]
    if missing:
        raise ConfigurationException(missing)
    return SourceApiClient(
        SourceCredentials(base_url=config.SOURCE_URL, service_key=config.SOURCE_SERVICE_KEY),
        timeout_s=config.SOURCE_TIMEOUT_S,
    )
