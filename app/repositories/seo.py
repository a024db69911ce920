"""SEO settings queries."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.repositories.base import BaseRepository
from app.models.seo import SeoSetting
from typing import List, Optional


class SeoSettingRepository(BaseRepository[SeoSetting]):

    def __init__(self, db: AsyncSession):
        super().__init__(SeoSetting, db)

    async def get_by_key(self, key: str) -> Optional[SeoSetting]:
        return await self.get_by_field("key", key)

    async def list_ordered(self, group: Optional[str] = None, active_only: bool = False) -> List[SeoSetting]:
        query = select(SeoSetting)
        if group:
            query = query.where(SeoSetting.group == group)
        if active_only:
            query = query.where(SeoSetting.is_active.is_(True))
        result = await self.db.execute(query.order_by(SeoSetting.group, SeoSetting.sort_order, SeoSetting.key))
        return list(result.scalars().all())
