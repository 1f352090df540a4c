from typing import List

from fastapi import APIRouter, Depends, status

from countapp.api.deps import get_preset_service, storage_errors
from countapp.modules.auth import Operation, require
from countapp.schemas.auth import IdentityClaim
from countapp.schemas.base import MessageResponse, BulkDeleteRequest
from countapp.schemas.survey import PresetWrite, PresetResponse
from countapp.services.registry_service import PresetService


router = APIRouter(prefix="/presets", tags=["presets"])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_preset(
    body: PresetWrite,
    identity: IdentityClaim = Depends(require(Operation.PRESET_CREATE)),
    service: PresetService = Depends(get_preset_service),
):
    with storage_errors("create_preset", "An error occurred while saving the preset."):
        preset = await service.create(identity, body)

    return MessageResponse(message="The preset has been saved.", id=preset.id)


@router.get("", response_model=List[PresetResponse])
async def list_presets(
    identity: IdentityClaim = Depends(require(Operation.PRESET_LIST)),
    service: PresetService = Depends(get_preset_service),
):
    with storage_errors("list_presets", "An error occurred while fetching presets."):
        return await service.list(identity)


@router.put("/{preset_id}", response_model=MessageResponse)
async def update_preset(
    preset_id: str,
    body: PresetWrite,
    identity: IdentityClaim = Depends(require(Operation.PRESET_UPDATE)),
    service: PresetService = Depends(get_preset_service),
):
    with storage_errors("update_preset", "An error occurred while updating the preset."):
        await service.update(identity, preset_id, body)

    return MessageResponse(message="The preset has been updated.", id=preset_id)


@router.delete("", response_model=MessageResponse)
async def delete_presets(
    body: BulkDeleteRequest,
    identity: IdentityClaim = Depends(require(Operation.PRESET_DELETE)),
    service: PresetService = Depends(get_preset_service),
):
    with storage_errors("delete_presets", "An error occurred while deleting presets."):
        deleted = await service.delete_many(identity, body.ids)

    return MessageResponse(message=f"{deleted} preset(s) deleted.")


@router.delete("/{preset_id}", response_model=MessageResponse)
async def delete_preset(
    preset_id: str,
    identity: IdentityClaim = Depends(require(Operation.PRESET_DELETE)),
    service: PresetService = Depends(get_preset_service),
):
    with storage_errors("delete_preset", "An error occurred while deleting the preset."):
        await service.delete_one(identity, preset_id)

    return MessageResponse(message="The preset has been deleted.", id=preset_id)
