"""Results store backed by a Supabase (PostgREST) REST endpoint."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Protocol

from pactometro.common.config_loader import StoreSettings
from pactometro.common.errors import StoreError
from pactometro.common.http import HttpClient, HttpRequestError

REST_PATH = "/rest/v1/{table}"


class ResultsStore(Protocol):
    def select(self, table: str, columns: list[str]) -> list[dict[str, Any]]: ...

    def upsert(self, table: str, rows: list[dict[str, Any]], *, on_conflict: str) -> None: ...


class SupabaseStore:
    def __init__(self, settings: StoreSettings, http_client: HttpClient | None = None) -> None:
        self.settings = settings
        self._owns_client = http_client is None
        self.http = http_client or HttpClient(
            headers={
                "apikey": settings.service_key,
                "Authorization": f"Bearer {settings.service_key}",
            }
        )

    def close(self) -> None:
        if self._owns_client:
            self.http.close()

    def __enter__(self) -> "SupabaseStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _table_url(self, table: str) -> str:
        return self.settings.url + REST_PATH.format(table=table)

    def select(self, table: str, columns: list[str]) -> list[dict[str, Any]]:
        url = self._table_url(table)
        try:
            payload = self.http.get_json(url, params={"select": ",".join(columns)})
        except HttpRequestError as exc:
            raise StoreError(f"Reading {table} failed: {exc}", status=exc.status) from exc
        if not isinstance(payload, list):
            raise StoreError(f"Reading {table} returned a non-list payload")
        return payload

    def upsert(self, table: str, rows: list[dict[str, Any]], *, on_conflict: str) -> None:
        url = self._table_url(table)
        try:
            self.http.post_json(
                url,
                rows,
                params={"on_conflict": on_conflict},
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            )
        except HttpRequestError as exc:
            raise StoreError(f"Upserting {len(rows)} rows into {table} failed: {exc}", status=exc.status) from exc
