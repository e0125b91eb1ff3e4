from typing import List, Tuple

from shopping_store.domain.models import Category, new_id

# (name, color_tag, tax_rate_percent), in display order
DEFAULT_CATEGORY_ROWS: Tuple[Tuple[str, str, float], ...] = (
    ("Food", "purple", 0.0),
    ("Medication", "blue", 0.0),
    ("Cleaning", "green", 8.875),
    ("Other", "gray", 8.875),
)


def default_categories() -> List[Category]:
    """Build the categories seeded on first run, each with a fresh id."""
    return [
        Category(id=new_id(), name=name, color_tag=color, tax_rate_percent=rate)
        for name, color, rate in DEFAULT_CATEGORY_ROWS
    ]
