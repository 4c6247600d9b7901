"""Base classes for data providers."""

import json
import logging
import time
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any

import httpx

from ..core.exceptions import DataSourceError
from ..core.models import SourceStatus
from ..core.types import DataSource, StageStatus

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for all data providers."""

    # Subclasses must define their data source
    SOURCE: DataSource = DataSource.CALCULATED

    def _status(
        self,
        action: str,
        status: StageStatus = StageStatus.OK,
        endpoint: str | None = None,
        error_message: str | None = None,
        started: float | None = None,
    ) -> SourceStatus:
        """Build the audit record for one call made by this provider."""
        duration_ms = None
        if started is not None:
            duration_ms = int((time.perf_counter() - started) * 1000)
        return SourceStatus(
            source=self.SOURCE,
            action=action,
            status=status,
            endpoint=endpoint,
            error_message=error_message,
            duration_ms=duration_ms,
        )

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is configured to make calls."""
        pass


class HttpJsonProvider(BaseProvider):
    """Base class for providers that GET JSON documents over HTTP."""

    def __init__(self, http: httpx.AsyncClient, timeout: float = 10.0):
        """
        Initialize the provider.

        Args:
            http: Shared async HTTP client, owned by the caller
            timeout: Per-request timeout in seconds
        """
        self.http = http
        self.timeout = timeout

    @abstractmethod
    def _error(
        self,
        endpoint: str,
        message: str,
        status_code: int | None = None,
    ) -> DataSourceError:
        """Build the provider-specific exception."""
        pass

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        GET a URL and decode its JSON body.

        Floats in the body are decoded straight to Decimal.

        Raises:
            DataSourceError: On transport errors, non-2xx status or invalid JSON
        """
        try:
            response = await self.http.get(
                url, params=params, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._error(
                url,
                f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            )
        except httpx.TimeoutException:
            raise self._error(url, f"timed out after {self.timeout}s")
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise self._error(url, str(e) or type(e).__name__)

        try:
            return json.loads(response.content, parse_float=Decimal)
        except ValueError as e:
            raise self._error(url, f"invalid JSON body: {e}", status_code=response.status_code)
