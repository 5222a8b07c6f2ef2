from typing import Callable, List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.modules.stores.models import Store


class StoreDirectory:
    """Lists the stores belonging to a business"""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def list_stores(self, business_id: str) -> List[str]:
        try:
            business_uuid = UUID(str(business_id))
        except ValueError:
            raise ValueError(f"Invalid business id '{business_id}'")

        stmt = (
            select(Store.id)
            .where(Store.business_id == business_uuid, Store.is_active.is_(True))
            .order_by(Store.created_at, Store.name)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [str(store_id) for store_id in result.scalars().all()]
