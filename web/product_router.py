from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from clients.llm import CompletionClient
from models.search import SearchFiltersDTO
from models.user import UserDTO
from services.product import ProductService
from services.review import ReviewService
from web.dependencies import get_completion_client, get_current_user, get_session
from web.schemas import AIFilterRequest, AIRecommendationRequest, ReviewRequest

product_router = APIRouter(prefix="/api/products", tags=["products"])


@product_router.get("")
async def list_products(keyword: str = "",
                        category: str = "",
                        min_price: float = Query(0, ge=0),
                        max_price: float = Query(0, ge=0),
                        sort: str = "",
                        page: int = Query(1, ge=1),
                        session: AsyncSession = Depends(get_session)):
    filters = SearchFiltersDTO(keyword=keyword, category=category, min_price=min_price, max_price=max_price,
                               sort_by=sort)
    result = await ProductService.list_products(filters, page, session)
    return {
        "success": True,
        "products": [product.model_dump(mode="json") for product in result.products],
        "total_products": result.total,
        "page": result.page,
        "per_page": result.per_page,
        "total_pages": result.total_pages,
    }


@product_router.get("/categories")
async def get_categories(session: AsyncSession = Depends(get_session)):
    return {"success": True, "categories": await ProductService.get_categories(session)}


@product_router.post("/ai-filter")
async def ai_filtered_products(payload: AIFilterRequest,
                               session: AsyncSession = Depends(get_session),
                               client: CompletionClient | None = Depends(get_completion_client)):
    filters, products = await ProductService.ai_filtered_products(payload.user_query, client, session)
    return {
        "success": True,
        "fallback": filters.fallback,
        "filters": filters.public_dict(),
        "products": [product.model_dump(mode="json") for product in products],
    }


@product_router.post("/ai-recommendation")
async def ai_recommended_products(payload: AIRecommendationRequest,
                                  session: AsyncSession = Depends(get_session),
                                  client: CompletionClient | None = Depends(get_completion_client)):
    products, fallback = await ProductService.ai_recommended_products(payload.user_prompt, client, session)
    return {
        "success": True,
        "fallback": fallback,
        "products": [product.model_dump(mode="json") for product in products],
    }


@product_router.get("/{product_id}")
async def get_product(product_id: int, session: AsyncSession = Depends(get_session)):
    product, reviews = await ProductService.get_product(product_id, session)
    return {
        "success": True,
        "product": product.model_dump(mode="json"),
        "reviews": [review.model_dump(mode="json") for review in reviews],
    }


@product_router.post("/{product_id}/review")
async def post_review(product_id: int,
                      payload: ReviewRequest,
                      response: Response,
                      user: UserDTO = Depends(get_current_user),
                      session: AsyncSession = Depends(get_session)):
    review, created = await ReviewService.upsert_review(user, product_id, payload.rating, payload.comment, session)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return {
        "success": True,
        "message": "Review added" if created else "Review updated",
        "review": review.model_dump(mode="json"),
    }


@product_router.delete("/{product_id}/review/{review_id}")
async def delete_review(product_id: int,
                        review_id: int,
                        user: UserDTO = Depends(get_current_user),
                        session: AsyncSession = Depends(get_session)):
    await ReviewService.delete_review(product_id, review_id, user, session)
    return {"success": True, "message": "Review deleted successfully"}
