# Pydantic schemas
from countapp.schemas.base import CamelModel, MessageResponse, BulkDeleteRequest
from countapp.schemas.auth import (
    IdentityClaim,
    LoginRequest,
    LoginResponse,
    VerifyTokenRequest,
    VerifyTokenResponse,
)
from countapp.schemas.survey import (
    WorkCategories,
    TemplateWrite,
    PresetWrite,
    TemplateResponse,
    PresetResponse,
)
from countapp.schemas.instance import (
    StartInstanceRequest,
    StartInstanceResponse,
    CompleteInstanceRequest,
    DiscardInstanceRequest,
    InstanceResponse,
    CompletedInRangeItem,
    CompletedItem,
)
from countapp.schemas.user import UserCreate, UserUpdate, UserResponse
