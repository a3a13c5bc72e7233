from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepo:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def db_commit(self):
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def db_rollback(self):
        await self.db.rollback()

    async def db_add_and_flush(self, value):
        try:
            self.db.add(value)
            await self.db.flush()
            return value
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def db_add_commit_and_refresh(self, value):
        try:
            self.db.add(value)
            await self.db.commit()
            await self.db.refresh(value)
            return value
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def _execute_and_commit(self, stmt) -> int:
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount
        except SQLAlchemyError:
            await self.db.rollback()
            raise
