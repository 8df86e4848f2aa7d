from sqlalchemy import select, update, delete, func

from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from enums.user_role import UserRole
from models.user import UserDTO, User


class UserRepository:
    @staticmethod
    async def get_by_id(user_id: int, session: AsyncSession) -> UserDTO | None:
        stmt = select(User).where(User.id == user_id).execution_options(populate_existing=True)
        user = await session_execute(stmt, session)
        user = user.scalar()
        if user is not None:
            return UserDTO.model_validate(user, from_attributes=True)
        else:
            return user

    @staticmethod
    async def create(user_dto: UserDTO, session: AsyncSession) -> int:
        user = User(**user_dto.model_dump(exclude={'id', 'created_at'}))
        session.add(user)
        await session_flush(session)
        return user.id

    @staticmethod
    async def update_role(user_id: int, role: UserRole, session: AsyncSession) -> None:
        stmt = update(User).where(User.id == user_id).values(role=role.value)
        await session_execute(stmt, session)

    @staticmethod
    async def delete(user_id: int, session: AsyncSession) -> None:
        stmt = delete(User).where(User.id == user_id)
        await session_execute(stmt, session)

    @staticmethod
    async def count_admins(session: AsyncSession) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == UserRole.ADMIN.value)
        result = await session_execute(stmt, session)
        return result.scalar()

    @staticmethod
    async def get_all(session: AsyncSession) -> list[UserDTO]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        users = await session_execute(stmt, session)
        return [UserDTO.model_validate(user, from_attributes=True) for user in users.scalars().all()]
