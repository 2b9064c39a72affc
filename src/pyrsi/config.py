"""Client configuration for pyrsi."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyrsi import _constants
from pyrsi.exceptions import RsiConfigError


def _env_int(value: str | None, name: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError as exc:
        raise RsiConfigError(f"{name} must be an integer, got {value!r}") from exc


def _env_float(value: str | None, name: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value.strip())
    except ValueError as exc:
        raise RsiConfigError(f"{name} must be a number, got {value!r}") from exc


def _env_list(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    items = tuple(part.strip() for part in value.split(",") if part.strip())
    return items or None


@dataclasses.dataclass(frozen=True)
class RsiConfig:
    """Client configuration.

    Parameters
    ----------
    archive_base_url : str
        Root of the per-day camera archive
        (``{root}/{YYYY}/{MM}/{DD}/camera/{station}``).
    dashcam_url : str
        Dashcam (AVL) listing endpoint.
    prediction_base_url : str
        Base URL of the prediction backend; endpoints are appended to it.
    warmup_url : str
        URL hit by warmup pings.
    manifest_url : str
        JSON manifest listing interpolation documents.
    avl_endpoint : str
        Path appended to ``prediction_base_url`` for AVL batches.
    rwis_endpoint : str
        Path appended to ``prediction_base_url`` for RWIS batches.
    avl_chunk_size : int
        Maximum number of AVL images per prediction request.
    rwis_chunk_size : int
        Maximum number of RWIS images per prediction request.
    rwis_lookback_minutes : int
        How far before the window end RWIS images are considered.
    warmup_containers : int
        Number of concurrent warmup pings sent by ``RsiClient.warmup``.
    timeout_seconds : float
        Total timeout applied to the owned HTTP session.
    station_ids : tuple of str
        RWIS station identifiers scanned in the archive.
    environment : str
        ``"production"`` disables test-only operations such as
        ``Store.reset``.
    """

    archive_base_url: str = _constants.ARCHIVE_BASE_URL
    dashcam_url: str = _constants.DASHCAM_URL
    prediction_base_url: str = _constants.PREDICTION_BASE_URL
    warmup_url: str = _constants.WARMUP_URL
    manifest_url: str = _constants.MANIFEST_URL
    avl_endpoint: str = _constants.AVL_ENDPOINT
    rwis_endpoint: str = _constants.RWIS_ENDPOINT
    avl_chunk_size: int = _constants.AVL_CHUNK_SIZE
    rwis_chunk_size: int = _constants.RWIS_CHUNK_SIZE
    rwis_lookback_minutes: int = _constants.RWIS_LOOKBACK_MINUTES
    warmup_containers: int = _constants.WARMUP_CONTAINERS
    timeout_seconds: float = 60.0
    station_ids: tuple[str, ...] = _constants.RWIS_STATION_IDS
    environment: str = "development"

    def __post_init__(self) -> None:
        if self.avl_chunk_size < 1 or self.rwis_chunk_size < 1:
            raise RsiConfigError("chunk sizes must be at least 1")
        if self.rwis_lookback_minutes < 0:
            raise RsiConfigError("rwis_lookback_minutes must not be negative")
        if self.warmup_containers < 0:
            raise RsiConfigError("warmup_containers must not be negative")

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @classmethod
    def from_env(cls, **overrides: Any) -> RsiConfig:
        """Create configuration from environment variables.

        Reads optional ``RSI_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        RsiConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "RSI_ARCHIVE_BASE_URL": "archive_base_url",
            "RSI_DASHCAM_URL": "dashcam_url",
            "RSI_PREDICTION_BASE_URL": "prediction_base_url",
            "RSI_WARMUP_URL": "warmup_url",
            "RSI_MANIFEST_URL": "manifest_url",
            "RSI_AVL_ENDPOINT": "avl_endpoint",
            "RSI_RWIS_ENDPOINT": "rwis_endpoint",
            "RSI_ENV": "environment",
        }
        _ENV_INT_MAP = {
            "RSI_AVL_CHUNK_SIZE": "avl_chunk_size",
            "RSI_RWIS_CHUNK_SIZE": "rwis_chunk_size",
            "RSI_RWIS_LOOKBACK_MINUTES": "rwis_lookback_minutes",
            "RSI_WARMUP_CONTAINERS": "warmup_containers",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_INT_MAP.items():
            parsed = _env_int(env.get(env_key), env_key)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        timeout = _env_float(env.get("RSI_TIMEOUT_SECONDS"), "RSI_TIMEOUT_SECONDS")
        if timeout is not None:
            config_kwargs["timeout_seconds"] = timeout

        stations = _env_list(env.get("RSI_STATION_IDS"))
        if stations is not None:
            config_kwargs["station_ids"] = stations

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
