# Re-export all models for convenient imports
from countapp.models.user import User, Role
from countapp.models.survey import SurveyTemplate, Preset
from countapp.models.survey_instance import SurveyInstance, SurveyResultLog, InstanceStatus

__all__ = [
    # User
    "User",
    "Role",
    # Registry
    "SurveyTemplate",
    "Preset",
    # Lifecycle
    "SurveyInstance",
    "SurveyResultLog",
    "InstanceStatus",
]
