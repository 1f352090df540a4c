"""
Survey template registry and instance start/resume endpoints
"""

from typing import List

from fastapi import APIRouter, Depends, status

from countapp.api.deps import get_template_service, get_instance_service, storage_errors
from countapp.modules.auth import Operation, require
from countapp.schemas.auth import IdentityClaim
from countapp.schemas.base import MessageResponse, BulkDeleteRequest
from countapp.schemas.instance import (
    StartInstanceRequest,
    StartInstanceResponse,
    InstanceResponse,
)
from countapp.schemas.survey import TemplateWrite, TemplateResponse
from countapp.services.registry_service import TemplateService
from countapp.services.survey_instance_service import SurveyInstanceService


router = APIRouter(prefix="/surveys", tags=["surveys"])


# ---- instances (declared before the /{template_id} routes) ----

@router.post("/instances", response_model=StartInstanceResponse,
             status_code=status.HTTP_201_CREATED)
async def start_instance(
    body: StartInstanceRequest,
    identity: IdentityClaim = Depends(require(Operation.INSTANCE_START)),
    service: SurveyInstanceService = Depends(get_instance_service),
):
    """Start a new survey instance from a template"""
    with storage_errors("start_instance", "An error occurred while starting the survey."):
        instance = await service.start(identity, body.survey_template_id, body.survey_template_name)

    return StartInstanceResponse(message="The survey has started.", instance_id=instance.id)


@router.get("/instances/in-progress", response_model=List[InstanceResponse])
async def get_in_progress_instance(
    identity: IdentityClaim = Depends(require(Operation.INSTANCE_RESUME)),
    service: SurveyInstanceService = Depends(get_instance_service),
):
    """The caller's in-progress instance, as a list of zero or one item"""
    with storage_errors("resume_instance", "An error occurred while fetching the survey in progress."):
        instance = await service.find_in_progress(identity)

    return [instance] if instance is not None else []


# ---- templates ----

@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    body: TemplateWrite,
    identity: IdentityClaim = Depends(require(Operation.TEMPLATE_CREATE)),
    service: TemplateService = Depends(get_template_service),
):
    with storage_errors("create_template", "An error occurred while saving the survey."):
        template = await service.create(identity, body)

    return MessageResponse(message="The survey has been saved.", id=template.id)


@router.get("", response_model=List[TemplateResponse])
async def list_templates(
    identity: IdentityClaim = Depends(require(Operation.TEMPLATE_LIST)),
    service: TemplateService = Depends(get_template_service),
):
    with storage_errors("list_templates", "An error occurred while fetching surveys."):
        return await service.list(identity)


@router.put("/{template_id}", response_model=MessageResponse)
async def update_template(
    template_id: str,
    body: TemplateWrite,
    identity: IdentityClaim = Depends(require(Operation.TEMPLATE_UPDATE)),
    service: TemplateService = Depends(get_template_service),
):
    with storage_errors("update_template", "An error occurred while updating the survey."):
        await service.update(identity, template_id, body)

    return MessageResponse(message="The survey has been updated.", id=template_id)


@router.delete("", response_model=MessageResponse)
async def delete_templates(
    body: BulkDeleteRequest,
    identity: IdentityClaim = Depends(require(Operation.TEMPLATE_DELETE)),
    service: TemplateService = Depends(get_template_service),
):
    with storage_errors("delete_templates", "An error occurred while deleting surveys."):
        deleted = await service.delete_many(identity, body.ids)

    return MessageResponse(message=f"{deleted} survey(s) deleted.")


@router.delete("/{template_id}", response_model=MessageResponse)
async def delete_template(
    template_id: str,
    identity: IdentityClaim = Depends(require(Operation.TEMPLATE_DELETE)),
    service: TemplateService = Depends(get_template_service),
):
    with storage_errors("delete_template", "An error occurred while deleting the survey."):
        await service.delete_one(identity, template_id)

    return MessageResponse(message="The survey has been deleted.", id=template_id)
