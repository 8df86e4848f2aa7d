from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import UserDTO
from services.order_management import OrderManagementService
from services.product import ProductService
from services.review import ReviewService
from services.user import UserService
from web.dependencies import get_session, require_admin
from web.schemas import OrderStatusRequest, ProductCreateRequest, ProductUpdateRequest, UserRoleRequest

admin_router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# Orders

@admin_router.get("/orders")
async def list_all_orders(session: AsyncSession = Depends(get_session)):
    orders, total_amount = await OrderManagementService.list_all_orders(session)
    return {
        "success": True,
        "total_amount": total_amount,
        "orders": [order.model_dump(mode="json") for order in orders],
    }


@admin_router.put("/orders/{order_id}/status")
async def update_order_status(order_id: int,
                              payload: OrderStatusRequest,
                              admin: UserDTO = Depends(require_admin),
                              session: AsyncSession = Depends(get_session)):
    await OrderManagementService.set_status(order_id, payload.status, session, admin_id=admin.id)
    return {"success": True, "message": "Order status updated"}


@admin_router.delete("/orders/{order_id}")
async def delete_order(order_id: int, restock: bool = False, session: AsyncSession = Depends(get_session)):
    await OrderManagementService.delete_order(order_id, session, restock=restock)
    return {"success": True, "message": "Order deleted"}


# Products

@admin_router.post("/products", status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreateRequest,
                         admin: UserDTO = Depends(require_admin),
                         session: AsyncSession = Depends(get_session)):
    product = await ProductService.create_product(payload.model_dump(), admin.id, session)
    return {"success": True, "product": product.model_dump(mode="json")}


@admin_router.get("/products/low-stock")
async def low_stock_products(session: AsyncSession = Depends(get_session)):
    products = await ProductService.get_low_stock_products(session)
    return {"success": True, "products": [product.model_dump(mode="json") for product in products]}


@admin_router.put("/products/{product_id}")
async def update_product(product_id: int,
                         payload: ProductUpdateRequest,
                         session: AsyncSession = Depends(get_session)):
    product = await ProductService.update_product(product_id, payload.model_dump(exclude_unset=True), session)
    return {"success": True, "product": product.model_dump(mode="json")}


@admin_router.delete("/products/{product_id}")
async def delete_product(product_id: int, session: AsyncSession = Depends(get_session)):
    await ProductService.delete_product(product_id, session)
    return {"success": True, "message": "Product deleted"}


# Reviews

@admin_router.get("/reviews")
async def list_all_reviews(session: AsyncSession = Depends(get_session)):
    reviews = await ReviewService.list_all_reviews(session)
    return {"success": True, "reviews": [review.model_dump(mode="json") for review in reviews]}


# Users

@admin_router.get("/users")
async def list_users(session: AsyncSession = Depends(get_session)):
    users = await UserService.list_users(session)
    return {"success": True, "users": [user.model_dump(mode="json") for user in users]}


@admin_router.put("/users/{user_id}/role")
async def update_user_role(user_id: int,
                           payload: UserRoleRequest,
                           admin: UserDTO = Depends(require_admin),
                           session: AsyncSession = Depends(get_session)):
    user = await UserService.update_role(admin, user_id, payload.role, session)
    return {"success": True, "user": user.model_dump(mode="json")}


@admin_router.delete("/users/{user_id}")
async def delete_user(user_id: int,
                      admin: UserDTO = Depends(require_admin),
                      session: AsyncSession = Depends(get_session)):
    await UserService.delete_user(admin, user_id, session)
    return {"success": True, "message": "User deleted"}
