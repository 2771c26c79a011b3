"""Studies domain: value objects exchanged with the study, participant and user services."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID, uuid4

from pydantic import Field


@dataclass(frozen=True)
class EmailAddress:
    address: str


@dataclass(frozen=True)
class Username:
    name: str


@dataclass(frozen=True)
class StudyOwner:
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class StudyInvitation:
    """Description of a study, shared with participants once they are invited."""
    name: str
    description: str = ""


@dataclass(frozen=True)
class StudyStatus:
    """
    Status of a study, with the actions which can be taken on it.
    Remote side reports "Configuring" until the study goes live.
    """
    id: UUID
    name: str
    status: Literal["Configuring", "Live"] = "Configuring"
    created_on: Optional[datetime] = None
    can_set_invitation: bool = True
    can_set_study_protocol: bool = True
    can_deploy_to_participants: bool = False
    can_go_live: bool = False


@dataclass(frozen=True)
class InputDataType:
    namespace: str
    name: str


@dataclass(frozen=True)
class StudyProtocolSnapshot:
    """Serializable study protocol: devices and tasks are kept as the protocol service emits them."""
    id: UUID
    owner_id: UUID
    name: str
    description: str = ""
    creation_date: Optional[datetime] = None
    master_devices: tuple[dict[str, Any], ...] = ()
    connected_devices: tuple[dict[str, Any], ...] = ()
    tasks: tuple[dict[str, Any], ...] = ()
    expected_participant_data: tuple[InputDataType, ...] = ()


@dataclass(frozen=True)
class Participant:
    id: UUID
    email: Optional[EmailAddress] = None
    username: Optional[Username] = None


@dataclass(frozen=True)
class Account:
    id: UUID
    email: Optional[EmailAddress] = None
    username: Optional[Username] = None


@dataclass(frozen=True)
class AssignParticipantDevices:
    """Devices (by role name) a participant will use in a deployment."""
    participant_id: UUID
    device_role_names: frozenset[str]


@dataclass(frozen=True)
class CustomInput:
    value: str
    kind: Literal["CustomInput"] = "CustomInput"


@dataclass(frozen=True)
class SexInput:
    value: Literal["Male", "Female"]
    kind: Literal["Sex"] = "Sex"


# Participant data is polymorphic; only the registered kinds can cross the wire.
Data = Annotated[Union[CustomInput, SexInput], Field(discriminator="kind")]


@dataclass(frozen=True)
class ParticipantGroupStatus:
    """Deployment status of a group of participants; id equals the study deployment id."""
    id: UUID
    participants: tuple[Participant, ...] = ()
    is_deployed: bool = False
    is_stopped: bool = False
    invited_on: Optional[datetime] = None
    data: dict[str, Optional[Data]] = field(default_factory=dict)
