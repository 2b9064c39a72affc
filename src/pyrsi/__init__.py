"""pyrsi - Road-surface imaging: AVL/RWIS fusion and reactive state."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyrsi")
except PackageNotFoundError:
    __version__ = "0+local"
from pyrsi._api.backend import BackendGateway, chunk_items
from pyrsi.classification import Label, class_by_number, highest_number_string
from pyrsi.client import QuerySource, RsiClient
from pyrsi.config import RsiConfig
from pyrsi.exceptions import (
    RsiConfigError,
    RsiError,
    RsiTransportError,
    RsiValidationError,
)
from pyrsi.fusion import fuse
from pyrsi.models import (
    AngleRecord,
    Feature,
    FeatureCollection,
    RawPointRecord,
    SensorType,
)
from pyrsi.state import StateKey, Store
from pyrsi.timerange import DateTimeParts, calculate_range, is_different_day, is_in_range

__all__ = [
    "__version__",
    "AngleRecord",
    "BackendGateway",
    "DateTimeParts",
    "Feature",
    "FeatureCollection",
    "Label",
    "QuerySource",
    "RawPointRecord",
    "RsiClient",
    "RsiConfig",
    "RsiConfigError",
    "RsiError",
    "RsiTransportError",
    "RsiValidationError",
    "SensorType",
    "StateKey",
    "Store",
    "calculate_range",
    "chunk_items",
    "class_by_number",
    "fuse",
    "highest_number_string",
    "is_different_day",
    "is_in_range",
]
