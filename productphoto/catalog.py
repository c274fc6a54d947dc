"""Static device catalog.

The default catalog lists every Garmin watch with on-device music storage.
A custom catalog can be supplied as a YAML list of mappings::

    - {series: Fenix, product: Fenix, model: "7"}
    - {series: Venu, product: Venu}
"""

from __future__ import annotations

from pathlib import Path

import yaml

from productphoto.types import CatalogItem

GARMIN_WATCHES: tuple[CatalogItem, ...] = (
    CatalogItem("Forerunner", "Forerunner", "245_Music"),
    CatalogItem("Forerunner", "Forerunner", "645_Music"),
    CatalogItem("Forerunner", "Forerunner", "945"),
    CatalogItem("Forerunner", "Forerunner", "955"),
    CatalogItem("Forerunner", "Forerunner", "965"),
    CatalogItem("Fenix", "Fenix", "5_Plus"),
    CatalogItem("Fenix", "Fenix", "5_Plus_Sapphire"),
    CatalogItem("Fenix", "Fenix", "5X_Plus"),
    CatalogItem("Fenix", "Fenix", "5X_Plus_Sapphire"),
    CatalogItem("Fenix", "Fenix", "6_Pro"),
    CatalogItem("Fenix", "Fenix", "6S_Pro"),
    CatalogItem("Fenix", "Fenix", "6S_Pro_Solar"),
    CatalogItem("Fenix", "Fenix", "6X_Pro_Solar"),
    CatalogItem("Fenix", "Fenix", "7"),
    CatalogItem("Fenix", "Fenix", "7S"),
    CatalogItem("Fenix", "Fenix", "7X"),
    CatalogItem("Vivoactive", "Vivoactive", "3_Music"),
    CatalogItem("Vivoactive", "Vivoactive", "3_Music_Verizon"),
    CatalogItem("Vivoactive", "Vivoactive", "4"),
    CatalogItem("Vivoactive", "Vivoactive", "5"),
    CatalogItem("Venu", "Venu", ""),
    CatalogItem("Venu", "Venu_Sq", "Music"),
    CatalogItem("Venu", "Venu", "2"),
    CatalogItem("Venu", "Venu", "2_Plus"),
    CatalogItem("D2", "D2", "Delta"),
    CatalogItem("D2", "D2", "Air"),
    CatalogItem("Enduro", "Enduro", "2_Music"),
    CatalogItem("MARQ", "MARQ", "Athlete"),
    CatalogItem("MARQ", "MARQ", "Commander"),
    CatalogItem("MARQ", "MARQ", "Adventurer"),
    CatalogItem("MARQ", "MARQ", "Aviator"),
)


def default_catalog() -> list[CatalogItem]:
    """Return the built-in catalog in its fixed order."""
    return list(GARMIN_WATCHES)


def load_catalog(path: Path) -> list[CatalogItem]:
    """Load a catalog from a YAML file.

    Accepts either a top-level list or a mapping with a ``catalog`` key.
    Numeric models (``model: 7``) are coerced to strings.

    Raises:
        ValueError: if the document is not a list of entries, or an entry
            lacks ``series`` or ``product``.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get("catalog") or []
    if not isinstance(data, list):
        raise ValueError(f"Catalog {path} must be a list of entries, got {type(data).__name__}")

    items: list[CatalogItem] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict) or "series" not in entry or "product" not in entry:
            raise ValueError(f"Catalog entry {i} in {path} needs 'series' and 'product': {entry!r}")
        model = entry.get("model")
        items.append(
            CatalogItem(
                series=str(entry["series"]),
                product=str(entry["product"]),
                model="" if model is None else str(model),
            )
        )
    return items
