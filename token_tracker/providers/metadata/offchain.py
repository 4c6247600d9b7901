"""Off-chain metadata provider.

Fetches the JSON document referenced by the on-chain metadata URI. The
document is expected to carry at least `image`, and optionally `name`,
`symbol` and `description`.
"""

import logging
import time

import httpx
from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import DataSourceError, MetadataJsonError
from ...core.models import OffChainMetadata, StageResult
from ...core.types import DataSource, StageStatus
from ..base import HttpJsonProvider

logger = logging.getLogger(__name__)


class OffChainMetadataProvider(HttpJsonProvider):
    """Fetches token metadata JSON from an arbitrary URI."""

    SOURCE = DataSource.OFFCHAIN_JSON

    def __init__(self, http: httpx.AsyncClient, timeout: float = 10.0):
        super().__init__(http, timeout=timeout)

    def is_available(self) -> bool:
        return True

    def _error(
        self,
        endpoint: str,
        message: str,
        status_code: int | None = None,
    ) -> DataSourceError:
        return MetadataJsonError(endpoint, message, status_code=status_code)

    async def fetch_json_metadata(self, uri: str) -> OffChainMetadata:
        """
        Fetch and parse the metadata document.

        Raises:
            MetadataJsonError: On network failure, timeout, or a body that
                is not a JSON object
        """
        logger.info(f"Fetching JSON metadata from {uri}")
        document = await self._get_json(uri)

        if not isinstance(document, dict):
            raise MetadataJsonError(uri, f"expected a JSON object, got {type(document).__name__}")

        try:
            return OffChainMetadata.model_validate(document)
        except PydanticValidationError as e:
            raise MetadataJsonError(uri, f"unexpected document shape: {e.error_count()} errors")

    async def lookup(self, uri: str) -> StageResult[OffChainMetadata]:
        """Best-effort variant of fetch_json_metadata; never raises."""
        started = time.perf_counter()
        try:
            document = await self.fetch_json_metadata(uri)
        except MetadataJsonError as e:
            logger.warning(f"Could not fetch or parse metadata JSON from {uri}: {e.message}")
            return StageResult[OffChainMetadata](
                status=self._status(
                    "json",
                    StageStatus.FAILED,
                    endpoint=uri,
                    error_message=e.message,
                    started=started,
                ),
            )

        status = StageStatus.OK if document.image else StageStatus.EMPTY
        return StageResult[OffChainMetadata](
            value=document,
            status=self._status("json", status, endpoint=uri, started=started),
        )
