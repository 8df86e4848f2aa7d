from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import UserDTO
from services.user import UserService
from web.dependencies import get_current_user, get_session
from web.schemas import WatchlistRequest

user_router = APIRouter(prefix="/api/users", tags=["users"])


def _watchlist_body(products, message: str | None = None) -> dict:
    body = {"success": True, "watchlist": [product.model_dump(mode="json") for product in products]}
    if message:
        body["message"] = message
    return body


@user_router.get("/watchlist")
async def get_watchlist(user: UserDTO = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    products = await UserService.get_watchlist(user.id, session)
    return _watchlist_body(products)


@user_router.post("/watchlist")
async def add_to_watchlist(payload: WatchlistRequest,
                           user: UserDTO = Depends(get_current_user),
                           session: AsyncSession = Depends(get_session)):
    products = await UserService.add_to_watchlist(user.id, payload.product_id, session)
    return _watchlist_body(products, "Added to watchlist")


@user_router.delete("/watchlist/{product_id}")
async def remove_from_watchlist(product_id: int,
                                user: UserDTO = Depends(get_current_user),
                                session: AsyncSession = Depends(get_session)):
    products = await UserService.remove_from_watchlist(user.id, product_id, session)
    return _watchlist_body(products, "Removed from watchlist")
