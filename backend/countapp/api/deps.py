"""
Shared endpoint dependencies
"""

from contextlib import contextmanager

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from countapp.core.database import get_db
from countapp.core.exceptions import StorageError
from countapp.core.logging_config import logger
from countapp.services import (
    SurveyInstanceService,
    TemplateService,
    PresetService,
    UserService,
)


@contextmanager
def storage_errors(context: str, message: str):
    """
    Turn a database failure inside the block into a StorageError.

    Application errors (CountAppError) pass through unchanged.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.log_error_with_context(e, context)
        raise StorageError(message)


def get_instance_service(db: AsyncSession = Depends(get_db)) -> SurveyInstanceService:
    return SurveyInstanceService(db)


def get_template_service(db: AsyncSession = Depends(get_db)) -> TemplateService:
    return TemplateService(db)


def get_preset_service(db: AsyncSession = Depends(get_db)) -> PresetService:
    return PresetService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)
