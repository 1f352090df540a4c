from countapp.services.survey_instance_service import SurveyInstanceService
from countapp.services.registry_service import TemplateService, PresetService
from countapp.services.user_service import UserService
