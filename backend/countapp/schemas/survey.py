from datetime import datetime
from typing import List, Optional

from countapp.schemas.base import CamelModel


class WorkCategories(CamelModel):
    """Category labels shared by templates and presets"""
    name: Optional[str] = None
    real_work: Optional[List[str]] = None
    incidental_work: Optional[List[str]] = None
    wasteful_work: Optional[List[str]] = None


class TemplateWrite(WorkCategories):
    """Body of template create and update"""
    no: Optional[int] = None


class PresetWrite(WorkCategories):
    """Body of preset create and update"""


class PresetResponse(CamelModel):
    id: str
    name: str
    real_work: Optional[List[str]] = None
    incidental_work: Optional[List[str]] = None
    wasteful_work: Optional[List[str]] = None
    author_id: str
    company_code: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class TemplateResponse(PresetResponse):
    no: Optional[int] = None
