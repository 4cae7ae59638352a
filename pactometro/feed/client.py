"""Authenticated client for the electoral authority's CSV download endpoints."""

from __future__ import annotations

from types import TracebackType

from pactometro.common.config_loader import FeedSettings
from pactometro.common.errors import FeedHttpError
from pactometro.common.http import HttpClient, HttpRequestError, TimeoutConfig

SNAPSHOT_INDEX_PATH = "/descargas/csv/data/getEnvio/{election_code}"
TOTALS_PATH = "/descargas/csv/data/getEscrutinioTotales/{election_code}/{snapshot_id}"


class FeedClient:
    def __init__(self, settings: FeedSettings, http_client: HttpClient | None = None) -> None:
        self.settings = settings
        self._owns_client = http_client is None
        self.http = http_client or HttpClient(
            timeout=TimeoutConfig(connect=settings.connect_timeout, read=settings.read_timeout),
            auth=(settings.user, settings.password),
        )

    def close(self) -> None:
        if self._owns_client:
            self.http.close()

    def __enter__(self) -> "FeedClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def snapshot_index_url(self) -> str:
        return self.settings.host + SNAPSHOT_INDEX_PATH.format(election_code=self.settings.election_code)

    def totals_url(self, snapshot_id: str) -> str:
        return self.settings.host + TOTALS_PATH.format(
            election_code=self.settings.election_code,
            snapshot_id=snapshot_id,
        )

    def _get(self, url: str) -> str:
        try:
            return self.http.get_text(url)
        except HttpRequestError as exc:
            raise FeedHttpError(str(exc), status=exc.status, body=exc.body, url=url) from exc

    def fetch_snapshot_index(self) -> str:
        return self._get(self.snapshot_index_url())

    def fetch_totals(self, snapshot_id: str) -> str:
        return self._get(self.totals_url(snapshot_id))
