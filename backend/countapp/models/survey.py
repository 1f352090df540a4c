from sqlalchemy import Column, String, DateTime, JSON, Integer

from countapp.core.database import Base
from countapp.core.types import GUID, generate_uuid, utc_now


class SurveyTemplate(Base):
    """Reusable definition of the work categories counted during a survey"""
    __tablename__ = "survey_templates"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    no = Column(Integer, nullable=True)
    name = Column(String(255), nullable=False)

    # Category labels, one list per kind of work
    real_work = Column(JSON, nullable=True)
    incidental_work = Column(JSON, nullable=True)
    wasteful_work = Column(JSON, nullable=True)

    author_id = Column(GUID, nullable=False)
    company_code = Column(String(64), nullable=False, index=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<SurveyTemplate {self.name}>"


class Preset(Base):
    """Saved set of work categories, not linked to any template"""
    __tablename__ = "presets"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)

    real_work = Column(JSON, nullable=True)
    incidental_work = Column(JSON, nullable=True)
    wasteful_work = Column(JSON, nullable=True)

    author_id = Column(GUID, nullable=False)
    company_code = Column(String(64), nullable=False, index=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Preset {self.name}>"
