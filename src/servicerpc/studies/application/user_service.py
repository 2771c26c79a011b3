"""User service: accounts, and including them as participants of a study."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, Union, runtime_checkable
from uuid import UUID

from servicerpc.ddd import ServiceRequest
from servicerpc.studies.domain import Account, EmailAddress, Participant, Username


@runtime_checkable
class UserService(Protocol):
    """Application service for accounts and their participation in studies."""

    async def create_account(self, identity: EmailAddress | Username) -> Account | None:
        ...

    async def create_participant(self, study_id: UUID, account_id: UUID) -> Participant:
        ...

    async def get_participants_for_study(self, study_id: UUID) -> list[Participant]:
        ...

    async def invite_participant(self, study_id: UUID, email_address: EmailAddress) -> Participant:
        ...


@dataclass(frozen=True)
class CreateAccountWithEmailAddress(ServiceRequest[None]):
    email_address: EmailAddress
    result_type: ClassVar[Any] = None


@dataclass(frozen=True)
class CreateAccountWithUsername(ServiceRequest[Account]):
    username: Username
    result_type: ClassVar[Any] = Account


@dataclass(frozen=True)
class CreateParticipant(ServiceRequest[Participant]):
    study_id: UUID
    account_id: UUID
    result_type: ClassVar[Any] = Participant


@dataclass(frozen=True)
class GetParticipantsForStudy(ServiceRequest[list[Participant]]):
    study_id: UUID
    result_type: ClassVar[Any] = list[Participant]


@dataclass(frozen=True)
class InviteParticipant(ServiceRequest[Participant]):
    study_id: UUID
    email_address: EmailAddress
    result_type: ClassVar[Any] = Participant


UserServiceRequest = Union[
    CreateAccountWithEmailAddress,
    CreateAccountWithUsername,
    CreateParticipant,
    GetParticipantsForStudy,
    InviteParticipant,
]
