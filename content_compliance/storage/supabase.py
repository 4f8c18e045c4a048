"""
Minimal Supabase (PostgREST) client used for rule loading and audit inserts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import requests

from content_compliance.config.settings import SupabaseSettings


class SupabaseError(RuntimeError):
    """Transport, HTTP or payload failure talking to Supabase."""


def _preview(response: requests.Response, limit: int) -> str:
    body = (response.text or "").strip()
    preview = body[:limit]
    if len(body) > len(preview):
        preview += "…"
    return preview


class SupabaseRestClient:
    """Thin wrapper around the PostgREST endpoints exposed by Supabase."""

    def __init__(self, settings: SupabaseSettings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "apikey": self.settings.api_key,
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

    def table_url(self, table: str) -> str:
        return f"{self.settings.url}/rest/v1/{table}"

    def select(self, table: str, filters: Optional[Mapping[str, str]] = None) -> List[Dict[str, Any]]:
        """Return rows matching equality ``filters`` (``column -> value``)."""
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        url = self.table_url(table)
        try:
            response = self.session.get(url, params=params, headers=self.headers, timeout=self.settings.timeout)
        except requests.RequestException as exc:
            raise SupabaseError(f"Supabase select failed for table '{table}': {exc}") from exc
        self._raise_for_status(response, table)
        try:
            payload = response.json()
        except ValueError as exc:
            raise SupabaseError(
                f"Supabase returned non-JSON payload for table '{table}': {_preview(response, 500)}"
            ) from exc
        if not isinstance(payload, list):
            raise SupabaseError(f"Supabase returned {type(payload).__name__} instead of rows for '{table}'")
        return payload

    def insert(self, table: str, row: Mapping[str, Any]) -> None:
        url = self.table_url(table)
        headers = {**self.headers, "Prefer": "return=minimal"}
        try:
            response = self.session.post(url, json=[dict(row)], headers=headers, timeout=self.settings.timeout)
        except requests.RequestException as exc:
            raise SupabaseError(f"Supabase insert failed for table '{table}': {exc}") from exc
        self._raise_for_status(response, table)

    @staticmethod
    def _raise_for_status(response: requests.Response, table: str) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise SupabaseError(
                f"Supabase HTTP {response.status_code} for table '{table}': {_preview(response, 1000)}"
            ) from exc


__all__ = ["SupabaseError", "SupabaseRestClient"]
