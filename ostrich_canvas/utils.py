"""
Utility functions for ostrich-canvas.
"""

from typing import Dict, Iterable, List

from .models import Row


def normalize_product(name: str) -> str:
    """
    Title-case every word of a product name.

    Example:
        normalize_product("  gadget x ")  # -> "Gadget X"
    """
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.strip().split(" "))


def normalize_region(name: str) -> str:
    """Capitalize a region name: 'EAST', 'east ' and 'East' all become 'East'."""
    name = name.strip()
    return name[:1].upper() + name[1:].lower()


def rows_to_records(rows: Iterable[Row]) -> List[Dict]:
    """Serialize rows the way the browser and the flows expect them (camelCase keys)."""
    return [row.model_dump(by_alias=True) for row in rows]
