"""Search query and file key derivation for catalog items."""

from __future__ import annotations

from productphoto.config import AcquisitionConfig
from productphoto.types import CatalogItem


class QueryBuilder:
    """Pure transform from a catalog item to ``(query, file_key)``."""

    def __init__(
        self,
        brand: str = "Garmin",
        query_suffix: str = "watch product photo official front facing high resolution",
    ) -> None:
        self.brand = brand
        self.query_suffix = query_suffix

    @classmethod
    def from_config(cls, config: AcquisitionConfig) -> QueryBuilder:
        return cls(brand=config.brand, query_suffix=config.query_suffix)

    def full_name(self, item: CatalogItem) -> str:
        """Human label, e.g. ``Garmin Fenix 7``; the model is omitted if empty."""
        parts = [self.brand, item.product]
        if item.model:
            parts.append(item.model)
        return " ".join(p for p in parts if p)

    def query(self, item: CatalogItem) -> str:
        return f"{self.full_name(item)} {self.query_suffix}".strip()

    def file_key(self, item: CatalogItem) -> str:
        return item.file_key

    def build(self, item: CatalogItem) -> tuple[str, str]:
        """Return ``(query, file_key)`` for *item*."""
        return self.query(item), self.file_key(item)
