from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import UserDTO
from services.cart import CartService
from web.dependencies import get_current_user, get_session
from web.schemas import AddToCartRequest, UpdateCartItemRequest

cart_router = APIRouter(prefix="/api/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(user: UserDTO = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    cart = await CartService.get_cart(user.id, session)
    return {"success": True, "cart": cart.model_dump(mode="json")}


@cart_router.post("/add")
async def add_to_cart(payload: AddToCartRequest,
                      user: UserDTO = Depends(get_current_user),
                      session: AsyncSession = Depends(get_session)):
    cart = await CartService.add_item(user.id, payload.product_id, session, quantity=payload.quantity)
    return {"success": True, "message": "Item added to cart", "cart": cart.model_dump(mode="json")}


@cart_router.put("/update")
async def update_cart_item(payload: UpdateCartItemRequest,
                           user: UserDTO = Depends(get_current_user),
                           session: AsyncSession = Depends(get_session)):
    cart = await CartService.set_item_quantity(user.id, payload.product_id, payload.quantity, session)
    return {"success": True, "message": "Cart updated", "cart": cart.model_dump(mode="json")}


@cart_router.delete("/remove/{product_id}")
async def remove_from_cart(product_id: int,
                           user: UserDTO = Depends(get_current_user),
                           session: AsyncSession = Depends(get_session)):
    cart = await CartService.remove_item(user.id, product_id, session)
    return {"success": True, "message": "Item removed from cart", "cart": cart.model_dump(mode="json")}


@cart_router.delete("/clear")
async def clear_cart(user: UserDTO = Depends(get_current_user), session: AsyncSession = Depends(get_session)):
    cart = await CartService.clear(user.id, session)
    return {"success": True, "message": "Cart cleared", "cart": cart.model_dump(mode="json")}
