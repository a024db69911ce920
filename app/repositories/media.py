"""Media library queries."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from app.repositories.base import BaseRepository
from app.models.media import Media
from typing import Dict, List, Optional, Tuple


class MediaRepository(BaseRepository[Media]):

    def __init__(self, db: AsyncSession):
        super().__init__(Media, db)

    async def list_filtered(
        self,
        media_type: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 15
    ) -> Tuple[List[Media], int]:
        query = select(Media)
        if media_type:
            query = query.where(Media.type == media_type)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Media.name.ilike(pattern),
                Media.original_name.ilike(pattern),
                Media.alt_text.ilike(pattern),
            ))
        return await self.paginate(query.order_by(Media.created_at.desc()), page, per_page)

    async def count_by_type(self) -> Dict[str, int]:
        result = await self.db.execute(select(Media.type, func.count(Media.id)).group_by(Media.type))
        return {media_type: count for media_type, count in result.all()}
