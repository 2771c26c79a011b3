"""Participant service: add participants to studies and manage their deployed groups."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Protocol, Union, runtime_checkable
from uuid import UUID

from servicerpc.ddd import ServiceRequest
from servicerpc.studies.domain import (
    AssignParticipantDevices,
    Data,
    EmailAddress,
    InputDataType,
    Participant,
    ParticipantGroupStatus,
)


@runtime_checkable
class ParticipantService(Protocol):
    """Application service for participants of a study and their participant groups."""

    async def add_participant(self, study_id: UUID, email: EmailAddress) -> Participant:
        ...

    async def get_participant(self, study_id: UUID, participant_id: UUID) -> Participant:
        ...

    async def get_participants(self, study_id: UUID) -> list[Participant]:
        ...

    async def deploy_participant_group(
        self, study_id: UUID, group: frozenset[AssignParticipantDevices]
    ) -> ParticipantGroupStatus:
        ...

    async def get_participant_group_status_list(self, study_id: UUID) -> list[ParticipantGroupStatus]:
        ...

    async def stop_participant_group(self, study_id: UUID, group_id: UUID) -> ParticipantGroupStatus:
        ...

    async def set_participant_group_data(
        self,
        study_id: UUID,
        group_id: UUID,
        input_data_type: InputDataType,
        data: Optional[Data] = None,
    ) -> ParticipantGroupStatus:
        ...


@dataclass(frozen=True)
class AddParticipant(ServiceRequest[Participant]):
    study_id: UUID
    email: EmailAddress
    result_type: ClassVar[Any] = Participant


@dataclass(frozen=True)
class GetParticipant(ServiceRequest[Participant]):
    study_id: UUID
    participant_id: UUID
    result_type: ClassVar[Any] = Participant


@dataclass(frozen=True)
class GetParticipants(ServiceRequest[list[Participant]]):
    study_id: UUID
    result_type: ClassVar[Any] = list[Participant]


@dataclass(frozen=True)
class DeployParticipantGroup(ServiceRequest[ParticipantGroupStatus]):
    study_id: UUID
    group: frozenset[AssignParticipantDevices]
    result_type: ClassVar[Any] = ParticipantGroupStatus


@dataclass(frozen=True)
class GetParticipantGroupStatusList(ServiceRequest[list[ParticipantGroupStatus]]):
    study_id: UUID
    result_type: ClassVar[Any] = list[ParticipantGroupStatus]


@dataclass(frozen=True)
class StopParticipantGroup(ServiceRequest[ParticipantGroupStatus]):
    study_id: UUID
    group_id: UUID
    result_type: ClassVar[Any] = ParticipantGroupStatus


@dataclass(frozen=True)
class SetParticipantGroupData(ServiceRequest[ParticipantGroupStatus]):
    study_id: UUID
    group_id: UUID
    input_data_type: InputDataType
    data: Optional[Data] = None
    result_type: ClassVar[Any] = ParticipantGroupStatus


ParticipantServiceRequest = Union[
    AddParticipant,
    GetParticipant,
    GetParticipants,
    DeployParticipantGroup,
    GetParticipantGroupStatusList,
    StopParticipantGroup,
    SetParticipantGroupData,
]
