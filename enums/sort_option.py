from enum import Enum


class SortOption(str, Enum):
    PRICE = "price"
    PRICE_DESC = "price-desc"
    RATING = "rating"
    NEWEST = "newest"

    @classmethod
    def parse(cls, value: str | None) -> 'SortOption':
        """Unknown or empty sort keys fall back to newest first."""
        if value:
            normalized = value.strip().lower()
            for option in cls:
                if option.value == normalized:
                    return option
        return cls.NEWEST
