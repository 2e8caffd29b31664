"""Deterministic provider error contracts."""

from __future__ import annotations

from enum import StrEnum


class ProviderErrorCode(StrEnum):
    """Stable remote provider error codes."""

    UNAVAILABLE = "provider_unavailable"
    BAD_STATUS = "provider_bad_status"
    INVALID_PAYLOAD = "provider_invalid_payload"
    UNSUPPORTED = "provider_unsupported"


class ProviderError(RuntimeError):
    """Provider failure with stable deterministic code."""

    def __init__(
        self,
        code: ProviderErrorCode,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create provider failure.

        Args:
            code: Stable provider error code.
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.code = code
        self.data = data or {}
