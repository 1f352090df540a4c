"""
Survey Instance Service - lifecycle of a counting session

    in-progress --complete--> completed
    in-progress --discard---> discarded

Both transitions are a single conditional UPDATE that only matches while the
row is still in progress, so two racing Complete/Discard calls cannot both
win: the loser gets InstanceStateConflictError. Completion also appends a
SurveyResultLog row in the same transaction.
"""

from datetime import date, datetime, time, timezone
from typing import Dict, List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from countapp.core.exceptions import (
    ValidationError,
    InstanceNotFoundError,
    InstanceStateConflictError,
)
from countapp.core.logging_config import logger
from countapp.core.types import utc_now
from countapp.models.survey_instance import SurveyInstance, SurveyResultLog, InstanceStatus
from countapp.modules.auth.tenancy import scoped, company_code_for_write
from countapp.schemas.auth import IdentityClaim


def parse_date_bound(value: str, field: str, end_of_day: bool = False) -> datetime:
    """
    Parse an ISO date or datetime query bound into a naive UTC datetime.

    A bare date (``2024-05-01``) stands for the whole day: the start of the day
    for a lower bound, its last microsecond for an upper bound.
    """
    text = value.strip()
    try:
        if len(text) == 10:
            day = date.fromisoformat(text)
            return datetime.combine(day, time.max if end_of_day else time.min)

        bound = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"'{value}' is not a valid date.", field=field)

    if bound.tzinfo is not None:
        bound = bound.astimezone(timezone.utc).replace(tzinfo=None)
    return bound


class SurveyInstanceService:
    """Service for starting, finishing and querying survey instances"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def start(
        self,
        identity: IdentityClaim,
        survey_template_id: Optional[str],
        survey_template_name: Optional[str],
    ) -> SurveyInstance:
        """Open a new in-progress instance for the caller"""
        if not survey_template_id or not survey_template_name:
            raise ValidationError("Survey template information is missing.")

        instance = SurveyInstance(
            survey_template_id=survey_template_id,
            name=survey_template_name,
            surveyor_id=identity.id,
            company_code=company_code_for_write(identity),
            status=InstanceStatus.IN_PROGRESS,
            counts={},
            started_at=utc_now(),
        )
        self.db.add(instance)
        await self.db.commit()
        await self.db.refresh(instance)

        logger.log_lifecycle_event(instance.id, "started", survey_template_id=survey_template_id)
        return instance

    async def find_in_progress(self, identity: IdentityClaim) -> Optional[SurveyInstance]:
        """The caller's most recently started in-progress instance in its own company"""
        result = await self.db.execute(
            select(SurveyInstance)
            .where(
                SurveyInstance.company_code == identity.company_code,
                SurveyInstance.surveyor_id == identity.id,
                SurveyInstance.status == InstanceStatus.IN_PROGRESS,
            )
            .order_by(SurveyInstance.started_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def complete(
        self,
        identity: IdentityClaim,
        instance_id: Optional[str],
        counts: Dict[str, int],
        total_count: Optional[int],
        discovery_rate: Optional[float],
        rank: Optional[str],
    ) -> SurveyInstance:
        """
        Move an instance to ``completed`` and store its tally and summary.

        Raises:
            ValidationError: no instance id given
            InstanceNotFoundError: no such instance in the caller's scope
            InstanceStateConflictError: the instance already left in-progress
        """
        if not instance_id:
            raise ValidationError("Instance ID is required.", field="instanceId")

        await self._transition(
            identity,
            instance_id,
            status=InstanceStatus.COMPLETED,
            counts=counts,
            total_count=total_count,
            discovery_rate=discovery_rate,
            rank=rank,
            completed_at=utc_now(),
        )

        instance = await self._get_scoped(identity, instance_id)
        self.db.add(SurveyResultLog(
            instance_id=instance.id,
            company_code=instance.company_code,
            surveyor_id=instance.surveyor_id,
            counts=counts,
            total_count=total_count,
            discovery_rate=discovery_rate,
            rank=rank,
            recorded_at=instance.completed_at,
        ))
        await self.db.commit()

        logger.log_lifecycle_event(instance.id, "completed", total_count=total_count, rank=rank)
        return instance

    async def discard(self, identity: IdentityClaim, instance_id: Optional[str]) -> SurveyInstance:
        """Move an instance to ``discarded``"""
        if not instance_id:
            raise ValidationError("Instance ID is required.", field="instanceId")

        await self._transition(
            identity,
            instance_id,
            status=InstanceStatus.DISCARDED,
            discarded_at=utc_now(),
        )
        instance = await self._get_scoped(identity, instance_id)
        await self.db.commit()

        logger.log_lifecycle_event(instance.id, "discarded")
        return instance

    async def list_completed_in_range(
        self,
        identity: IdentityClaim,
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> List[SurveyInstance]:
        """Completed instances whose start falls within [start_date, end_date]"""
        if not start_date or not end_date:
            raise ValidationError("Please specify a start date and an end date.")

        start = parse_date_bound(start_date, "startDate")
        end = parse_date_bound(end_date, "endDate", end_of_day=True)

        statement = (
            select(SurveyInstance)
            .where(
                SurveyInstance.status == InstanceStatus.COMPLETED,
                SurveyInstance.started_at >= start,
                SurveyInstance.started_at <= end,
            )
            .order_by(SurveyInstance.started_at.asc())
        )
        result = await self.db.execute(scoped(statement, identity, SurveyInstance))
        return list(result.scalars().all())

    async def list_completed(self, identity: IdentityClaim) -> List[SurveyInstance]:
        """All completed instances in scope, newest first"""
        statement = (
            select(SurveyInstance)
            .where(SurveyInstance.status == InstanceStatus.COMPLETED)
            .order_by(SurveyInstance.started_at.desc())
        )
        result = await self.db.execute(scoped(statement, identity, SurveyInstance))
        return list(result.scalars().all())

    async def delete_completed(self, identity: IdentityClaim, ids: Optional[List[str]]) -> int:
        """
        Delete completed instances by id as one batch.

        Ids that do not exist, belong to another company or are not completed
        are skipped. Returns the number of rows removed.
        """
        if not ids:
            raise ValidationError("Please specify the IDs to delete.", field="ids")

        statement = delete(SurveyInstance).where(
            SurveyInstance.id.in_(ids),
            SurveyInstance.status == InstanceStatus.COMPLETED,
        )
        result = await self.db.execute(scoped(statement, identity, SurveyInstance))
        await self.db.commit()

        logger.info(f"Deleted {result.rowcount} completed instance(s) of {len(ids)} requested")
        return result.rowcount

    async def _transition(self, identity: IdentityClaim, instance_id: str, **values) -> None:
        """Apply ``values`` only if the instance is still in progress"""
        statement = (
            update(SurveyInstance)
            .where(
                SurveyInstance.id == instance_id,
                SurveyInstance.status == InstanceStatus.IN_PROGRESS,
            )
            .values(**values)
        )
        result = await self.db.execute(scoped(statement, identity, SurveyInstance))
        if result.rowcount == 1:
            return

        await self.db.rollback()
        existing = await self._find_scoped(identity, instance_id)
        if existing is None:
            raise InstanceNotFoundError(instance_id)

        logger.warning(
            f"Rejected transition of instance {instance_id}: already {existing.status.value}",
            extra={"event_type": "instance_conflict", "instance_id": instance_id},
        )
        raise InstanceStateConflictError(instance_id, existing.status.value)

    async def _find_scoped(self, identity: IdentityClaim, instance_id: str) -> Optional[SurveyInstance]:
        statement = (
            select(SurveyInstance)
            .where(SurveyInstance.id == instance_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(scoped(statement, identity, SurveyInstance))
        return result.scalar_one_or_none()

    async def _get_scoped(self, identity: IdentityClaim, instance_id: str) -> SurveyInstance:
        instance = await self._find_scoped(identity, instance_id)
        if instance is None:
            raise InstanceNotFoundError(instance_id)
        return instance
