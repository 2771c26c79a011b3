"""Studies subsystem: domain values, service requests and HTTP clients."""
from servicerpc.studies.infrastructure import (
    ParticipantServiceClient,
    StudyServiceClient,
    UserServiceClient,
    create_studies_codec,
)

__all__ = [
    "ParticipantServiceClient",
    "StudyServiceClient",
    "UserServiceClient",
    "create_studies_codec",
]
