"""Application layer: service contracts and the requests each service accepts."""
from servicerpc.studies.application.participant_service import ParticipantService, ParticipantServiceRequest
from servicerpc.studies.application.study_service import StudyService, StudyServiceRequest
from servicerpc.studies.application.user_service import UserService, UserServiceRequest

__all__ = [
    "ParticipantService",
    "ParticipantServiceRequest",
    "StudyService",
    "StudyServiceRequest",
    "UserService",
    "UserServiceRequest",
]
