import logging

from sqlalchemy.ext.asyncio import AsyncSession

from enums.user_role import UserRole
from exceptions import ForbiddenException, ProductNotFoundException, UserNotFoundException
from models.product import ProductDTO
from models.user import UserDTO
from repositories.product import ProductRepository
from repositories.review import ReviewRepository
from repositories.user import UserRepository
from repositories.watchlist import WatchlistRepository
from services.review import ReviewService
from utils.transaction_manager import TransactionManager


class UserService:

    @staticmethod
    async def get_by_id(user_id: int, session: AsyncSession) -> UserDTO | None:
        return await UserRepository.get_by_id(user_id, session)

    @staticmethod
    async def list_users(session: AsyncSession) -> list[UserDTO]:
        return await UserRepository.get_all(session)

    @staticmethod
    async def update_role(requester: UserDTO, target_id: int, role: UserRole, session: AsyncSession) -> UserDTO:
        """
        Change a user's role.

        Raises:
            UserNotFoundException: Target user doesn't exist
            ForbiddenException: Admin demoting themselves, or the change would leave no admin
        """
        target = await UserRepository.get_by_id(target_id, session)
        if target is None:
            raise UserNotFoundException(target_id)

        if target.role == role:
            return target

        if target.is_admin and role != UserRole.ADMIN:
            if target.id == requester.id:
                raise ForbiddenException("You cannot change your own admin role", user_id=requester.id)
            if await UserRepository.count_admins(session) <= 1:
                raise ForbiddenException("Cannot remove the last admin", user_id=requester.id)

        async with TransactionManager.atomic(session):
            await UserRepository.update_role(target_id, role, session)

        logging.info(f"User {target_id} role changed {target.role.value} -> {role.value} by admin {requester.id}")
        return await UserRepository.get_by_id(target_id, session)

    @staticmethod
    async def delete_user(requester: UserDTO, target_id: int, session: AsyncSession) -> None:
        """
        Raises:
            ForbiddenException: Requester deleting themselves, or removing the last admin
            UserNotFoundException: Target user doesn't exist
        """
        if requester.id == target_id:
            raise ForbiddenException("You cannot delete your own account", user_id=requester.id)

        target = await UserRepository.get_by_id(target_id, session)
        if target is None:
            raise UserNotFoundException(target_id)
        if target.is_admin and await UserRepository.count_admins(session) <= 1:
            raise ForbiddenException("Cannot remove the last admin", user_id=requester.id)

        async with TransactionManager.atomic(session):
            reviewed_product_ids = await ReviewRepository.get_product_ids_by_user(target_id, session)
            await UserRepository.delete(target_id, session)
            # reviews went with the user (FK cascade)
            for product_id in reviewed_product_ids:
                await ReviewService.recompute_rating(product_id, session)
        logging.info(f"User {target_id} deleted by admin {requester.id}")

    # Watchlist

    @staticmethod
    async def get_watchlist(user_id: int, session: AsyncSession) -> list[ProductDTO]:
        return await WatchlistRepository.get_products(user_id, session)

    @staticmethod
    async def add_to_watchlist(user_id: int, product_id: int, session: AsyncSession) -> list[ProductDTO]:
        """
        Save a product to the user's watchlist. Adding a watched product again is a no-op.

        Raises:
            ProductNotFoundException: Product doesn't exist
        """
        async with TransactionManager.atomic(session):
            if await ProductRepository.get_by_id(product_id, session) is None:
                raise ProductNotFoundException(product_id)
            if not await WatchlistRepository.contains(user_id, product_id, session):
                await WatchlistRepository.add(user_id, product_id, session)
                logging.info(f"User {user_id} watching product {product_id}")
        return await WatchlistRepository.get_products(user_id, session)

    @staticmethod
    async def remove_from_watchlist(user_id: int, product_id: int, session: AsyncSession) -> list[ProductDTO]:
        """Unwatched or unknown products are ignored."""
        async with TransactionManager.atomic(session):
            await WatchlistRepository.remove(user_id, product_id, session)
        return await WatchlistRepository.get_products(user_id, session)
