"""
Registry services for survey templates and presets.

Both registries hold a named set of work categories owned by a company and
share the same create/list/update/delete rules, so the logic lives once in
RegistryService and the subclasses only name their model and fields.
"""

from typing import Any, Dict, List, Optional, Type

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from countapp.core.exceptions import (
    ValidationError,
    ResourceNotFoundError,
    TemplateNotFoundError,
    PresetNotFoundError,
)
from countapp.core.logging_config import logger
from countapp.core.types import utc_now
from countapp.models.survey import SurveyTemplate, Preset
from countapp.modules.auth.tenancy import scoped, company_code_for_write
from countapp.schemas.auth import IdentityClaim
from countapp.schemas.survey import WorkCategories


class RegistryService:
    """Tenant-scoped CRUD over a table of named work-category sets"""

    model: Type = None
    not_found_error: Type[ResourceNotFoundError] = ResourceNotFoundError
    fields: tuple = ("real_work", "incidental_work", "wasteful_work")
    label: str = "item"

    def __init__(self, db: AsyncSession):
        self.db = db

    def _values(self, data: WorkCategories) -> Dict[str, Any]:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError(f"The {self.label} name is required.", field="name")

        values = {field: getattr(data, field, None) for field in self.fields}
        values["name"] = name
        return values

    def _order_by(self):
        return (self.model.created_at.asc(),)

    async def create(self, identity: IdentityClaim, data: WorkCategories):
        item = self.model(
            **self._values(data),
            author_id=identity.id,
            company_code=company_code_for_write(identity),
            created_at=utc_now(),
        )
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(f"Created {self.label} {item.id}")
        return item

    async def list(self, identity: IdentityClaim) -> List:
        statement = select(self.model).order_by(*self._order_by())
        result = await self.db.execute(scoped(statement, identity, self.model))
        return list(result.scalars().all())

    async def update(self, identity: IdentityClaim, item_id: str, data: WorkCategories):
        """Replace name and categories; the owner and company stay unchanged"""
        values = self._values(data)
        values["updated_at"] = utc_now()

        statement = update(self.model).where(self.model.id == item_id).values(**values)
        result = await self.db.execute(scoped(statement, identity, self.model))
        if result.rowcount == 0:
            await self.db.rollback()
            raise self.not_found_error(item_id)

        await self.db.commit()
        item = await self._get(identity, item_id)

        logger.info(f"Updated {self.label} {item_id}")
        return item

    async def delete_many(self, identity: IdentityClaim, ids: Optional[List[str]]) -> int:
        """Delete by id as one batch; ids outside the caller's scope are skipped"""
        if not ids:
            raise ValidationError("Please specify the IDs to delete.", field="ids")

        statement = delete(self.model).where(self.model.id.in_(ids))
        result = await self.db.execute(scoped(statement, identity, self.model))
        await self.db.commit()

        logger.info(f"Deleted {result.rowcount} {self.label}(s) of {len(ids)} requested")
        return result.rowcount

    async def delete_one(self, identity: IdentityClaim, item_id: str) -> None:
        statement = delete(self.model).where(self.model.id == item_id)
        result = await self.db.execute(scoped(statement, identity, self.model))
        if result.rowcount == 0:
            await self.db.rollback()
            raise self.not_found_error(item_id)

        await self.db.commit()
        logger.info(f"Deleted {self.label} {item_id}")

    async def _get(self, identity: IdentityClaim, item_id: str):
        statement = (
            select(self.model)
            .where(self.model.id == item_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(scoped(statement, identity, self.model))
        item = result.scalar_one_or_none()
        if item is None:
            raise self.not_found_error(item_id)
        return item


class TemplateService(RegistryService):
    model = SurveyTemplate
    not_found_error = TemplateNotFoundError
    fields = ("no", "real_work", "incidental_work", "wasteful_work")
    label = "survey"

    def _order_by(self):
        return (self.model.no.asc(), self.model.created_at.asc())


class PresetService(RegistryService):
    model = Preset
    not_found_error = PresetNotFoundError
    label = "preset"
