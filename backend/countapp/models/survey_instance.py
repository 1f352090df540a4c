from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer, Float, JSON, Index
import enum

from countapp.core.database import Base
from countapp.core.types import GUID, generate_uuid, utc_now


class InstanceStatus(str, enum.Enum):
    """Survey instance states. COMPLETED and DISCARDED are terminal."""
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DISCARDED = "discarded"


class SurveyInstance(Base):
    """
    One counting session run by a surveyor against a template.

    ``survey_template_id`` and ``name`` are a snapshot taken at start, so the
    instance stays displayable after the template is edited or deleted.
    The summary fields are only populated once the instance is completed.
    """
    __tablename__ = "survey_instances"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    survey_template_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)

    surveyor_id = Column(GUID, nullable=False)
    company_code = Column(String(64), nullable=False)

    status = Column(
        SQLEnum(InstanceStatus, values_callable=lambda e: [m.value for m in e]),
        default=InstanceStatus.IN_PROGRESS,
        nullable=False,
    )
    counts = Column(JSON, nullable=False, default=dict)

    # Completion summary, computed by the client
    total_count = Column(Integer, nullable=True)
    discovery_rate = Column(Float, nullable=True)
    rank = Column(String(32), nullable=True)

    started_at = Column(DateTime, default=utc_now, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    discarded_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_instances_surveyor_status", "company_code", "surveyor_id", "status", "started_at"),
        Index("ix_instances_company_status", "company_code", "status", "started_at"),
    )

    def __repr__(self):
        return f"<SurveyInstance {self.id} {self.status}>"


class SurveyResultLog(Base):
    """Append-only record of every completion, written in the completing transaction"""
    __tablename__ = "survey_result_logs"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    instance_id = Column(GUID, nullable=False, index=True)
    company_code = Column(String(64), nullable=False, index=True)
    surveyor_id = Column(GUID, nullable=False)

    counts = Column(JSON, nullable=False)
    total_count = Column(Integer, nullable=True)
    discovery_rate = Column(Float, nullable=True)
    rank = Column(String(32), nullable=True)

    recorded_at = Column(DateTime, default=utc_now, nullable=False)

    def __repr__(self):
        return f"<SurveyResultLog {self.instance_id}>"
