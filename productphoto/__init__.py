"""productphoto — Validated product photo acquisition and background removal."""

__version__ = "0.1.0"

from productphoto.types import (
    AcquisitionResult,
    AcquisitionStatus,
    CatalogItem,
    MattingRecord,
    MattingStatus,
)

__all__ = [
    "AcquisitionResult",
    "AcquisitionStatus",
    "CatalogItem",
    "MattingRecord",
    "MattingStatus",
    "__version__",
]
