"""Category directory for taskpulse.

Categories are owned outside the core; the core only looks them up by id.
"""

from typing import Dict, Iterable, List, Mapping

from pydantic import BaseModel, Field


class Category(BaseModel):
    """A task category as seen by the core (read-only)."""

    id: str = Field(..., description="Category identifier")
    name: str = Field(..., description="Display name")
    color: str = Field("#6B7280", description="Display color (hex)")
    icon: str = Field("Tag", description="Icon name")


# Default directory served by the HTTP API when no other directory is supplied.
DEFAULT_CATEGORIES: List[Category] = [
    Category(id="1", name="Work", color="#5B4CF5", icon="Briefcase"),
    Category(id="2", name="Personal", color="#8B7FF7", icon="User"),
    Category(id="3", name="Shopping", color="#FF6B6B", icon="ShoppingCart"),
    Category(id="4", name="Health", color="#4ECDC4", icon="Heart"),
    Category(id="5", name="Learning", color="#FFD93D", icon="BookOpen"),
]


def build_directory(categories: Iterable[Category]) -> Dict[str, Category]:
    """Index categories by id, preserving the given order."""
    return {c.id: c for c in categories}


def category_name(categories: Mapping[str, Category], category_id) -> str:
    """Name of a category, or "" if it is unknown."""
    category = categories.get(category_id) if category_id is not None else None
    return category.name if category else ""
