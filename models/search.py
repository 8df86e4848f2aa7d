from pydantic import BaseModel


class SearchFiltersDTO(BaseModel):
    """
    Structured catalog filters.

    Produced by QueryNormalizationService from free text, or built directly
    from query-string parameters. Zero / empty string means "no constraint".
    """
    keyword: str = ""
    category: str = ""
    min_price: float = 0
    max_price: float = 0
    min_rating: float = 0
    sort_by: str = ""
    fallback: bool = False

    @classmethod
    def degraded(cls, query: str) -> 'SearchFiltersDTO':
        """Deterministic result used whenever the AI backend can't be used."""
        return cls(keyword=(query or "").lower(), fallback=True)

    def public_dict(self) -> dict:
        return self.model_dump(exclude={"fallback"})
