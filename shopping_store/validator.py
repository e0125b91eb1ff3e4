import math
from typing import Any, List, Optional, Tuple

from shopping_store.errors import ValidationError


class InputValidator:
    """Validate raw user input for cart items and categories.

    Every violation found is collected and reported in a single
    ValidationError, messages joined by "; ", so a form can show all of
    them at once. Names are stripped of surrounding whitespace; a name that
    is blank after stripping counts as empty.
    """

    def validate_item(
        self, name: Any, unit_price: Any, quantity: Any, category_id: Any
    ) -> Tuple[str, float, int, str]:
        """Return the normalized (name, unit_price, quantity, category_id) or raise ValidationError.

        category_id only has to be a string; it may name a category that does
        not exist.
        """
        errors: List[str] = []

        if not isinstance(category_id, str):
            errors.append("category id must be a string")

        clean_name = self._clean_name(name, "item name", errors)

        price = self._to_number(unit_price)
        if price is None:
            errors.append("unit price must be a finite number")
        elif price < 0:
            errors.append("unit price must not be negative")

        if isinstance(quantity, bool) or not isinstance(quantity, int):
            errors.append("quantity must be an integer")
        elif quantity < 1:
            errors.append("quantity must be at least 1")

        if errors:
            raise ValidationError("; ".join(errors))
        return clean_name, float(price), int(quantity), category_id

    def validate_category(self, name: Any, tax_rate_percent: Any) -> Tuple[str, float]:
        """Return the normalized (name, tax_rate_percent) or raise ValidationError."""
        errors: List[str] = []

        clean_name = self._clean_name(name, "category name", errors)

        rate = self._to_number(tax_rate_percent)
        if rate is None:
            errors.append("tax rate must be a finite number")
        elif rate < 0:
            errors.append("tax rate must not be negative")

        if errors:
            raise ValidationError("; ".join(errors))
        return clean_name, float(rate)

    @staticmethod
    def _clean_name(raw: Any, label: str, errors: List[str]) -> str:
        if not isinstance(raw, str):
            errors.append(f"{label} must be a string")
            return ""
        stripped = raw.strip()
        if not stripped:
            errors.append(f"{label} must not be empty")
        return stripped

    @staticmethod
    def _to_number(raw: Any) -> Optional[float]:
        if isinstance(raw, bool):
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(value):
            return None
        return value
