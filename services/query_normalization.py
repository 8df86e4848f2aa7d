"""
Query Normalization Layer.

Turns free text into structured catalog filters, and ranks candidate products
for a free-text request, using a hosted completion model. Neither operation
ever fails its caller: an unconfigured, unreachable, slow or incoherent model
always yields the deterministic fallback result.
"""

import asyncio
import json
import logging

import config
from clients.llm import CompletionClient
from enums.product_category import ProductCategory
from enums.sort_option import SortOption
from models.product import ProductSummaryDTO
from models.search import SearchFiltersDTO
from services.pricing import PricingService

logger = logging.getLogger(__name__)

MAX_RATING = 5

FILTERS_SYSTEM_PROMPT = "You are a precise search parameter extractor. Output only valid JSON."
RANKING_SYSTEM_PROMPT = "You are a product recommendation engine. Output only valid JSON."

MATCHING_PRINCIPLES = """Apply these matching principles:
- Category matching: e.g., "landscape image camera" -> "Cameras" category
- Use case matching: e.g., "running shoes for marathons" -> "Sports" category
- Functional matching: e.g., "gaming laptop for students" -> "Laptops" or "Electronics"
- Synonym matching: e.g., "computers" -> "Laptops", "photography equipment" -> "Cameras"
"""


def _filters_prompt(query: str) -> str:
    return f"""Extract search parameters from an e-commerce shopper's natural language query.

VALID CATEGORIES: {', '.join(ProductCategory.values())}

{MATCHING_PRINCIPLES}
Extract:
1. Map intent to one of the VALID CATEGORIES (empty string if none fits).
2. Pricing constraints (minPrice, maxPrice), 0 when absent.
3. Minimum rating (0-5).
4. Sort order: 'price'|'price-desc'|'rating'|'newest' or empty string.
5. Concise 'keyword' for text search.

User Query: {json.dumps(query)}

Return EXACTLY this JSON structure:
{{"keyword": "string", "category": "string", "minPrice": number, "maxPrice": number, "minRating": number, "sortBy": "string"}}"""


def _ranking_prompt(prompt: str, candidates: list[ProductSummaryDTO], limit: int) -> str:
    summaries = json.dumps([candidate.model_dump() for candidate in candidates])
    return f"""User Request: {json.dumps(prompt)}
Available Products: {summaries}

Identify the top {limit} most relevant products for the request.

{MATCHING_PRINCIPLES}
Return ONLY a JSON object with a "recommendedIds" key containing an array of product IDs.
Example: {{"recommendedIds": [12, 7]}}"""


class QueryNormalizationService:

    @staticmethod
    async def normalize_filters(query: str, client: CompletionClient | None) -> SearchFiltersDTO:
        """
        Free text -> SearchFiltersDTO.

        Falls back to ``SearchFiltersDTO.degraded(query)`` (lowercased keyword,
        no other constraint) whenever the model can't be used.
        """
        if client is None or not client.is_configured:
            logger.info("AI filters unavailable (no API key), using keyword fallback")
            return SearchFiltersDTO.degraded(query)

        try:
            response = await asyncio.wait_for(
                client.complete_json(FILTERS_SYSTEM_PROMPT, _filters_prompt(query), temperature=0.1),
                timeout=config.AI_TIMEOUT_SECONDS,
            )
            if not isinstance(response, dict):
                raise ValueError(f"Unexpected response type {type(response).__name__}")
        except Exception as e:
            logger.warning(f"AI filters degraded to keyword search: {type(e).__name__}: {e}")
            return SearchFiltersDTO.degraded(query)

        filters = QueryNormalizationService.parse_filters(response)
        logger.info(f"AI filters for query: {filters.public_dict()}")
        return filters

    @staticmethod
    def parse_filters(response: dict) -> SearchFiltersDTO:
        """Sanitize raw model output into filters."""
        keyword = response.get("keyword")
        keyword = keyword.strip() if isinstance(keyword, str) else ""

        category = response.get("category")
        category = category.strip() if isinstance(category, str) else ""
        valid_categories = {value.lower(): value for value in ProductCategory.values()}
        category = valid_categories.get(category.lower(), "")

        min_price = max(PricingService.coerce_price(response.get("minPrice")), 0.0)
        max_price = max(PricingService.coerce_price(response.get("maxPrice")), 0.0)
        if min_price > 0 and max_price > 0 and min_price > max_price:
            min_price, max_price = max_price, min_price

        min_rating = min(max(PricingService.coerce_price(response.get("minRating")), 0.0), MAX_RATING)

        sort_by = response.get("sortBy")
        sort_by = sort_by.strip().lower() if isinstance(sort_by, str) else ""
        if sort_by not in [option.value for option in SortOption]:
            sort_by = ""

        return SearchFiltersDTO(
            keyword=keyword,
            category=category,
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            sort_by=sort_by,
        )

    @staticmethod
    async def rank_products(prompt: str,
                            candidates: list[ProductSummaryDTO],
                            client: CompletionClient | None) -> tuple[list[int], bool]:
        """
        Rank candidate products for a free-text request.

        Returns:
            (ordered product ids, fallback) where fallback=True means the ids are
            the first AI_FALLBACK_RECOMMENDATION_LIMIT candidates, unranked
        """
        if not candidates:
            return [], False

        fallback_ids = [candidate.id for candidate in candidates[:config.AI_FALLBACK_RECOMMENDATION_LIMIT]]
        if client is None or not client.is_configured:
            logger.info("AI ranking unavailable (no API key), returning unranked candidates")
            return fallback_ids, True

        limit = config.AI_RECOMMENDATION_LIMIT
        try:
            response = await asyncio.wait_for(
                client.complete_json(RANKING_SYSTEM_PROMPT, _ranking_prompt(prompt, candidates, limit), temperature=0.3),
                timeout=config.AI_TIMEOUT_SECONDS,
            )
            if not isinstance(response, dict):
                raise ValueError(f"Unexpected response type {type(response).__name__}")
        except Exception as e:
            logger.warning(f"AI ranking degraded to unranked candidates: {type(e).__name__}: {e}")
            return fallback_ids, True

        recommended = response.get("recommendedIds")
        if not isinstance(recommended, list):
            logger.warning("AI ranking returned no recommendedIds list")
            return [], False

        known_ids = {candidate.id for candidate in candidates}
        ranked = []
        for raw_id in recommended:
            product_id = QueryNormalizationService._to_id(raw_id)
            if product_id in known_ids and product_id not in ranked:
                ranked.append(product_id)
            if len(ranked) == limit:
                break
        return ranked, False

    @staticmethod
    def _to_id(raw_id) -> int | None:
        if isinstance(raw_id, bool):
            return None
        if isinstance(raw_id, int):
            return raw_id
        if isinstance(raw_id, str) and raw_id.strip().isdigit():
            return int(raw_id.strip())
        return None
