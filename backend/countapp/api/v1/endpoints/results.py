"""
Survey result endpoints: finishing an instance and querying completed ones
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from countapp.api.deps import get_instance_service, storage_errors
from countapp.modules.auth import Operation, require
from countapp.schemas.auth import IdentityClaim
from countapp.schemas.base import MessageResponse, BulkDeleteRequest
from countapp.schemas.instance import (
    CompleteInstanceRequest,
    DiscardInstanceRequest,
    CompletedInRangeItem,
    CompletedItem,
)
from countapp.services.survey_instance_service import SurveyInstanceService


router = APIRouter(prefix="/results", tags=["results"])


@router.post("", response_model=MessageResponse)
async def complete_instance(
    body: CompleteInstanceRequest,
    identity: IdentityClaim = Depends(require(Operation.INSTANCE_COMPLETE)),
    service: SurveyInstanceService = Depends(get_instance_service),
):
    """Complete an in-progress instance and record its tally"""
    with storage_errors("complete_instance", "An error occurred while saving the results."):
        instance = await service.complete(
            identity,
            body.instance_id,
            counts=body.counts,
            total_count=body.total_count,
            discovery_rate=body.discovery_rate,
            rank=body.rank,
        )

    return MessageResponse(message="The results have been saved.", id=instance.id)


@router.post("/discard", response_model=MessageResponse)
async def discard_instance(
    body: DiscardInstanceRequest,
    identity: IdentityClaim = Depends(require(Operation.INSTANCE_DISCARD)),
    service: SurveyInstanceService = Depends(get_instance_service),
):
    """Abandon an in-progress instance"""
    with storage_errors("discard_instance", "An error occurred while discarding the survey."):
        instance = await service.discard(identity, body.instance_id)

    return MessageResponse(message="The survey has been discarded.", id=instance.id)


@router.get("", response_model=List[CompletedInRangeItem])
async def list_results_in_range(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    identity: IdentityClaim = Depends(require(Operation.RESULT_QUERY_RANGE)),
    service: SurveyInstanceService = Depends(get_instance_service),
):
    """Completed instances started within the given dates, oldest first"""
    with storage_errors("list_results_in_range", "An error occurred while fetching results."):
        instances = await service.list_completed_in_range(identity, start_date, end_date)

    return [
        CompletedInRangeItem(
            id=instance.id,
            survey_id=instance.survey_template_id,
            survey_name=instance.name,
            counts=instance.counts or {},
            surveyed_at=instance.started_at,
        )
        for instance in instances
    ]


@router.get("/all", response_model=List[CompletedItem])
async def list_all_results(
    identity: IdentityClaim = Depends(require(Operation.RESULT_QUERY_ALL)),
    service: SurveyInstanceService = Depends(get_instance_service),
):
    """Every completed instance in scope, newest first"""
    with storage_errors("list_all_results", "An error occurred while fetching results."):
        instances = await service.list_completed(identity)

    return [
        CompletedItem(id=instance.id, name=instance.name, created_at=instance.started_at)
        for instance in instances
    ]


@router.delete("", response_model=MessageResponse)
async def delete_results(
    body: BulkDeleteRequest,
    identity: IdentityClaim = Depends(require(Operation.RESULT_DELETE)),
    service: SurveyInstanceService = Depends(get_instance_service),
):
    with storage_errors("delete_results", "An error occurred while deleting results."):
        deleted = await service.delete_completed(identity, body.ids)

    return MessageResponse(message=f"{deleted} result(s) deleted.")
