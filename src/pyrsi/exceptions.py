"""Custom exception hierarchy for pyrsi."""

from __future__ import annotations


class RsiError(Exception):
    """Base exception for all pyrsi errors."""


class RsiConfigError(RsiError):
    """Invalid or missing configuration."""


class RsiTransportError(RsiError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        self.body = body
        super().__init__(message)


class RsiValidationError(RsiError):
    """A raw sensor record could not be turned into a typed payload.

    Raised at the fusion boundary; the fusion engine converts it into a
    skipped record plus a warning instead of failing the whole pass.
    """

    def __init__(self, message: str, *, record_id: str = "") -> None:
        self.record_id = record_id
        super().__init__(message)
