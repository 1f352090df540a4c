"""
User account management for company administrators
"""

from typing import List

from fastapi import APIRouter, Depends, status

from countapp.api.deps import get_user_service, storage_errors
from countapp.modules.auth import Operation, require
from countapp.schemas.auth import IdentityClaim
from countapp.schemas.base import MessageResponse, BulkDeleteRequest
from countapp.schemas.user import UserCreate, UserUpdate, UserResponse
from countapp.services.user_service import UserService


router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
async def list_users(
    identity: IdentityClaim = Depends(require(Operation.USER_LIST)),
    service: UserService = Depends(get_user_service),
):
    """Users of the caller's company; every company for super"""
    with storage_errors("list_users", "An error occurred while fetching users."):
        return await service.list(identity)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    identity: IdentityClaim = Depends(require(Operation.USER_CREATE)),
    service: UserService = Depends(get_user_service),
):
    with storage_errors("create_user", "An error occurred while creating the user."):
        user = await service.create(identity, body)

    return MessageResponse(message="The user has been created.", id=user.id)


@router.put("/{user_pk}", response_model=MessageResponse)
async def update_user(
    user_pk: str,
    body: UserUpdate,
    identity: IdentityClaim = Depends(require(Operation.USER_UPDATE)),
    service: UserService = Depends(get_user_service),
):
    with storage_errors("update_user", "An error occurred while updating the user."):
        await service.update(identity, user_pk, body)

    return MessageResponse(message="The user has been updated.", id=user_pk)


@router.delete("", response_model=MessageResponse)
async def delete_users(
    body: BulkDeleteRequest,
    identity: IdentityClaim = Depends(require(Operation.USER_DELETE)),
    service: UserService = Depends(get_user_service),
):
    with storage_errors("delete_users", "An error occurred while deleting users."):
        deleted = await service.delete_many(identity, body.ids)

    return MessageResponse(message=f"{deleted} user(s) deleted.")


@router.delete("/{user_pk}", response_model=MessageResponse)
async def delete_user(
    user_pk: str,
    identity: IdentityClaim = Depends(require(Operation.USER_DELETE)),
    service: UserService = Depends(get_user_service),
):
    with storage_errors("delete_user", "An error occurred while deleting the user."):
        await service.delete_one(identity, user_pk)

    return MessageResponse(message="The user has been deleted.", id=user_pk)
