"""Study service: create studies, set their protocol, go live and deploy to participants."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Protocol, Union, runtime_checkable
from uuid import UUID

from servicerpc.ddd import ServiceRequest
from servicerpc.studies.domain import (
    AssignParticipantDevices,
    EmailAddress,
    Participant,
    StudyInvitation,
    StudyOwner,
    StudyProtocolSnapshot,
    StudyStatus,
)


@runtime_checkable
class StudyService(Protocol):
    """Application service for creating and managing studies."""

    async def create_study(
        self, owner: StudyOwner, name: str, invitation: Optional[StudyInvitation] = None
    ) -> StudyStatus:
        ...

    async def get_study_status(self, study_id: UUID) -> StudyStatus:
        ...

    async def get_studies_overview(self, owner: StudyOwner) -> list[StudyStatus]:
        ...

    async def add_participant(self, study_id: UUID, email: EmailAddress) -> Participant:
        ...

    async def get_participants(self, study_id: UUID) -> list[Participant]:
        ...

    async def set_protocol(self, study_id: UUID, protocol: StudyProtocolSnapshot) -> StudyStatus:
        ...

    async def go_live(self, study_id: UUID) -> StudyStatus:
        ...

    async def deploy_participant_group(
        self, study_id: UUID, group: frozenset[AssignParticipantDevices]
    ) -> StudyStatus:
        ...


@dataclass(frozen=True)
class CreateStudy(ServiceRequest[StudyStatus]):
    owner: StudyOwner
    name: str
    invitation: Optional[StudyInvitation] = None
    result_type: ClassVar[Any] = StudyStatus


@dataclass(frozen=True)
class GetStudyStatus(ServiceRequest[StudyStatus]):
    study_id: UUID
    result_type: ClassVar[Any] = StudyStatus


@dataclass(frozen=True)
class GetStudiesOverview(ServiceRequest[list[StudyStatus]]):
    owner: StudyOwner
    result_type: ClassVar[Any] = list[StudyStatus]


@dataclass(frozen=True)
class AddParticipant(ServiceRequest[Participant]):
    study_id: UUID
    email: EmailAddress
    result_type: ClassVar[Any] = Participant


@dataclass(frozen=True)
class GetParticipants(ServiceRequest[list[Participant]]):
    study_id: UUID
    result_type: ClassVar[Any] = list[Participant]


@dataclass(frozen=True)
class SetProtocol(ServiceRequest[StudyStatus]):
    study_id: UUID
    protocol: StudyProtocolSnapshot
    result_type: ClassVar[Any] = StudyStatus


@dataclass(frozen=True)
class GoLive(ServiceRequest[StudyStatus]):
    study_id: UUID
    result_type: ClassVar[Any] = StudyStatus


@dataclass(frozen=True)
class DeployParticipantGroup(ServiceRequest[StudyStatus]):
    study_id: UUID
    group: frozenset[AssignParticipantDevices]
    result_type: ClassVar[Any] = StudyStatus


StudyServiceRequest = Union[
    CreateStudy,
    GetStudyStatus,
    GetStudiesOverview,
    AddParticipant,
    GetParticipants,
    SetProtocol,
    GoLive,
    DeployParticipantGroup,
]
