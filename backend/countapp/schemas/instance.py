from datetime import datetime
from typing import Dict, Optional

from countapp.models.survey_instance import InstanceStatus
from countapp.schemas.base import CamelModel


class StartInstanceRequest(CamelModel):
    survey_template_id: Optional[str] = None
    survey_template_name: Optional[str] = None


class StartInstanceResponse(CamelModel):
    message: str
    instance_id: str


class CompleteInstanceRequest(CamelModel):
    """Tally and summary as computed by the client; stored as given"""
    instance_id: Optional[str] = None
    counts: Dict[str, int] = {}
    total_count: Optional[int] = None
    discovery_rate: Optional[float] = None
    rank: Optional[str] = None


class DiscardInstanceRequest(CamelModel):
    instance_id: Optional[str] = None


class InstanceResponse(CamelModel):
    id: str
    survey_template_id: str
    name: str
    surveyor_id: str
    company_code: str
    status: InstanceStatus
    counts: Dict[str, int]
    total_count: Optional[int] = None
    discovery_rate: Optional[float] = None
    rank: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None
    discarded_at: Optional[datetime] = None


class CompletedInRangeItem(CamelModel):
    id: str
    survey_id: str
    survey_name: str
    counts: Dict[str, int]
    surveyed_at: datetime


class CompletedItem(CamelModel):
    id: str
    name: str
    created_at: datetime
