"""HTTP/JSON client for a remote job scheduler."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from jobwatch.provider.base import RemoteJobProvider
from jobwatch.provider.errors import ProviderError, ProviderErrorCode
from jobwatch.provider.models import Execution, JobSnapshot
from jobwatch.settings.models import Settings

_LOGGER = logging.getLogger(__name__)

_JOBS_ADAPTER = TypeAdapter(list[JobSnapshot])
_EXECUTIONS_ADAPTER = TypeAdapter(list[Execution])


class HttpJobProvider(RemoteJobProvider):
    """Provider backed by a scheduler exposing a small JSON API.

    Endpoints:
        ``GET /jobs``, ``GET /executions``, ``POST /jobs/{name}/trigger``,
        ``POST /jobs/{name}/clear-error``, ``GET /settings``, ``PUT /settings``.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create provider client.

        Args:
            base_url: Scheduler API root URL.
            timeout_seconds: Per-request timeout.
            transport: Optional transport override.
        """
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def list_jobs(self) -> list[JobSnapshot]:
        """Fetch job snapshots.

        Returns:
            Decoded snapshots; ``null`` payloads decode as empty.
        """
        payload = await self._request_json("GET", "/jobs")
        return self._decode(_JOBS_ADAPTER, payload or [], what="jobs")

    async def list_executions(self) -> list[Execution]:
        """Fetch execution history.

        Returns:
            Decoded executions; ``null`` payloads decode as empty.
        """
        payload = await self._request_json("GET", "/executions")
        return self._decode(_EXECUTIONS_ADAPTER, payload or [], what="executions")

    async def trigger(self, job_name: str) -> None:
        """Request an immediate run of one job.

        Args:
            job_name: Target job name.
        """
        await self._request("POST", f"/jobs/{quote(job_name, safe='')}/trigger")

    async def clear_error(self, job_name: str) -> None:
        """Clear one job's server-side error.

        Args:
            job_name: Target job name.
        """
        await self._request("POST", f"/jobs/{quote(job_name, safe='')}/clear-error")

    async def load_settings(self) -> Settings:
        """Fetch the full settings object.

        Returns:
            Settings merged over defaults.

        Raises:
            ProviderError: If payload is not a valid settings object.
        """
        payload = await self._request_json("GET", "/settings")
        if payload is None:
            return Settings()
        try:
            return Settings.model_validate(payload)
        except ValidationError as exc:
            raise ProviderError(
                ProviderErrorCode.INVALID_PAYLOAD,
                f"Invalid settings payload: {exc}",
            ) from exc

    async def save_settings(self, settings: Settings) -> None:
        """Replace the full settings object.

        Args:
            settings: Settings to persist.
        """
        await self._request("PUT", "/settings", json=settings.to_wire())

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> HttpJobProvider:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def _request(
        self, method: str, path: str, *, json: object | None = None
    ) -> httpx.Response:
        """Send one request and map transport/status failures.

        Args:
            method: HTTP method.
            path: Path relative to base URL.
            json: Optional JSON body.

        Returns:
            Successful response.

        Raises:
            ProviderError: On transport failure or non-2xx status.
        """
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as exc:
            raise ProviderError(
                ProviderErrorCode.UNAVAILABLE,
                f"Request timed out: {method} {path}",
                data={"method": method, "path": path},
            ) from exc
        except httpx.RequestError as exc:
            raise ProviderError(
                ProviderErrorCode.UNAVAILABLE,
                f"Request failed: {method} {path}: {exc}",
                data={"method": method, "path": path},
            ) from exc
        if response.is_error:
            _LOGGER.debug(
                "Provider returned %s for %s %s", response.status_code, method, path
            )
            raise ProviderError(
                ProviderErrorCode.BAD_STATUS,
                f"Provider returned HTTP {response.status_code} for {method} {path}",
                data={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "body": response.text[:200],
                },
            )
        return response

    async def _request_json(self, method: str, path: str) -> object:
        response = await self._request(method, path)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(
                ProviderErrorCode.INVALID_PAYLOAD,
                f"Provider returned non-JSON body for {method} {path}",
            ) from exc

    @staticmethod
    def _decode(adapter: TypeAdapter, payload: object, *, what: str) -> list:  # type: ignore[type-arg]
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise ProviderError(
                ProviderErrorCode.INVALID_PAYLOAD,
                f"Invalid {what} payload: {exc}",
            ) from exc
