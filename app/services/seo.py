"""SEO settings: typed key/value pairs grouped for the admin screen."""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.seo import SeoSettingRepository
from app.models.seo import SeoSetting, SeoValueType
from app.schemas.seo import SeoSettingUpsert
from app.utils.exceptions import NotFoundError, ValidationError
import json
import logging

logger = logging.getLogger(__name__)


def serialize_value(value: Any, value_type: SeoValueType) -> Optional[str]:
    """Text form of a setting value for storage."""
    if value is None:
        return None
    if value_type == SeoValueType.JSON:
        return value if isinstance(value, str) else json.dumps(value)
    if value_type == SeoValueType.BOOLEAN:
        if isinstance(value, str):
            return "1" if value.strip().lower() in ("1", "true", "yes", "on") else "0"
        return "1" if value else "0"
    return str(value)


class SeoService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.repo = SeoSettingRepository(db_session)

    async def list_grouped(self) -> Dict[str, List[SeoSetting]]:
        grouped: Dict[str, List[SeoSetting]] = {}
        for setting in await self.repo.list_ordered():
            grouped.setdefault(setting.group, []).append(setting)
        return grouped

    async def upsert(self, data: SeoSettingUpsert) -> SeoSetting:
        """
        Create the setting or update the one with the same key.

        Raises:
            ValidationError: If a JSON or number value cannot be parsed
        """
        value = serialize_value(data.value, data.type)
        if value is not None and data.type == SeoValueType.JSON:
            try:
                json.loads(value)
            except ValueError:
                raise ValidationError.for_field("value", "The value must be valid JSON.")
        if value is not None and data.type == SeoValueType.NUMBER:
            try:
                float(value)
            except ValueError:
                raise ValidationError.for_field("value", "The value must be a number.")

        values = {
            "value": value,
            "type": data.type.value,
            "group": data.group,
            "description": data.description,
            "is_active": data.is_active,
            "sort_order": data.sort_order,
        }

        setting = await self.repo.get_by_key(data.key)
        if setting is None:
            setting = await self.repo.create({"key": data.key, **values})
            logger.info(f"SEO setting created: {data.key}")
        else:
            setting = await self.repo.update(setting, values)
            logger.info(f"SEO setting updated: {data.key}")
        return setting

    async def delete(self, key: str) -> None:
        setting = await self.repo.get_by_key(key)
        if setting is None:
            raise NotFoundError("SEO setting", key)
        await self.repo.delete(setting)
        logger.info(f"SEO setting deleted: {key}")

    async def public_group(self, group: str) -> Dict[str, Any]:
        """Active settings of a group as key to typed value."""
        settings = await self.repo.list_ordered(group=group, active_only=True)
        return {setting.key: setting.typed_value for setting in settings}
