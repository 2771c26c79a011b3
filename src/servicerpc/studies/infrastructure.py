"""
Infrastructure: HTTP clients for the study, participant and user endpoints.
Each client posts its service's requests to a single endpoint on host.
"""
from __future__ import annotations

from typing import Any, Optional, Union, overload
from uuid import UUID

from servicerpc.core.config import Configure
from servicerpc.rpc.client import ApplicationServiceClient
from servicerpc.rpc.envelope import EnvelopeCodec
from servicerpc.rpc.protocol import RpcTransport
from servicerpc.studies.application import participant_service as ps
from servicerpc.studies.application import study_service as ss
from servicerpc.studies.application import user_service as us
from servicerpc.studies.domain import (
    Account,
    AssignParticipantDevices,
    Data,
    EmailAddress,
    InputDataType,
    Participant,
    ParticipantGroupStatus,
    StudyInvitation,
    StudyOwner,
    StudyProtocolSnapshot,
    StudyStatus,
    Username,
)

STUDIES_API_VERSION = "1.0"


def create_studies_codec(request_type: Any) -> EnvelopeCodec:
    """Codec for one of the studies subsystem's request unions."""
    return EnvelopeCodec(request_type, api_version=STUDIES_API_VERSION)


class StudyServiceClient(ApplicationServiceClient[ss.StudyServiceRequest]):
    """
    Create and manage studies on a studies endpoint.
    host: name of the studies endpoint, without port (domain) and protocol.
    configure: overrides the default transport configuration.
    """

    def __init__(
        self,
        host: str,
        configure: Optional[Configure] = None,
        *,
        transport: Optional[RpcTransport] = None,
    ) -> None:
        super().__init__(host, create_studies_codec(ss.StudyServiceRequest), configure, transport=transport)

    async def create_study(
        self, owner: StudyOwner, name: str, invitation: Optional[StudyInvitation] = None
    ) -> StudyStatus:
        """
        Create a new study for owner.
        name is only visible to the owner; invitation is shared with participants once invited,
        and defaults to one carrying name remotely.
        """
        return await self.invoke(ss.CreateStudy(owner, name, invitation))

    async def get_study_status(self, study_id: UUID) -> StudyStatus:
        """Raises ArgumentError when a study with study_id does not exist."""
        return await self.invoke(ss.GetStudyStatus(study_id))

    async def get_studies_overview(self, owner: StudyOwner) -> list[StudyStatus]:
        """Status for all studies created by owner."""
        return await self.invoke(ss.GetStudiesOverview(owner))

    async def add_participant(self, study_id: UUID, email: EmailAddress) -> Participant:
        """
        Add a participant identified by email; adding the same email again returns the same participant.
        Raises ArgumentError when a study with study_id does not exist.
        """
        return await self.invoke(ss.AddParticipant(study_id, email))

    async def get_participants(self, study_id: UUID) -> list[Participant]:
        """Raises ArgumentError when a study with study_id does not exist."""
        return await self.invoke(ss.GetParticipants(study_id))

    async def set_protocol(self, study_id: UUID, protocol: StudyProtocolSnapshot) -> StudyStatus:
        """
        Raises ArgumentError when the study does not exist, the snapshot is invalid,
        or the protocol has errors preventing deployment.
        """
        return await self.invoke(ss.SetProtocol(study_id, protocol))

    async def go_live(self, study_id: UUID) -> StudyStatus:
        """
        Lock in the current protocol so the study may be deployed.
        Raises ArgumentError for an unknown study, StateError when no protocol is set yet.
        """
        return await self.invoke(ss.GoLive(study_id))

    async def deploy_participant_group(
        self, study_id: UUID, group: frozenset[AssignParticipantDevices]
    ) -> StudyStatus:
        """
        Deploy the study to a group of previously added participants.
        Raises ArgumentError when the study or a participant does not exist, group is empty,
        a device role is not part of the protocol, or not all devices are assigned.
        Raises StateError when the study is not ready for deployment.
        """
        return await self.invoke(ss.DeployParticipantGroup(study_id, frozenset(group)))


class ParticipantServiceClient(ApplicationServiceClient[ps.ParticipantServiceRequest]):
    """Add participants to studies and create deployments for them on a participants endpoint."""

    def __init__(
        self,
        host: str,
        configure: Optional[Configure] = None,
        *,
        transport: Optional[RpcTransport] = None,
    ) -> None:
        super().__init__(host, create_studies_codec(ps.ParticipantServiceRequest), configure, transport=transport)

    async def add_participant(self, study_id: UUID, email: EmailAddress) -> Participant:
        """
        Add a participant identified by email; adding the same email again returns the same participant.
        Raises ArgumentError when a study with study_id does not exist.
        """
        return await self.invoke(ps.AddParticipant(study_id, email))

    async def get_participant(self, study_id: UUID, participant_id: UUID) -> Participant:
        """Raises ArgumentError when the study or participant does not exist."""
        return await self.invoke(ps.GetParticipant(study_id, participant_id))

    async def get_participants(self, study_id: UUID) -> list[Participant]:
        """Raises ArgumentError when a study with study_id does not exist."""
        return await self.invoke(ps.GetParticipants(study_id))

    async def deploy_participant_group(
        self, study_id: UUID, group: frozenset[AssignParticipantDevices]
    ) -> ParticipantGroupStatus:
        """
        Deploy the study to group. A group already deployed and still running returns its latest status.
        Raises ArgumentError/StateError under the same conditions as the study service.
        """
        return await self.invoke(ps.DeployParticipantGroup(study_id, frozenset(group)))

    async def get_participant_group_status_list(self, study_id: UUID) -> list[ParticipantGroupStatus]:
        """Status of every participant group of the study. Raises ArgumentError when the study does not exist."""
        return await self.invoke(ps.GetParticipantGroupStatusList(study_id))

    async def stop_participant_group(self, study_id: UUID, group_id: UUID) -> ParticipantGroupStatus:
        """Stop the deployment of group_id; no more data is collected."""
        return await self.invoke(ps.StopParticipantGroup(study_id, group_id))

    async def set_participant_group_data(
        self,
        study_id: UUID,
        group_id: UUID,
        input_data_type: InputDataType,
        data: Optional[Data] = None,
    ) -> ParticipantGroupStatus:
        """
        Set participant data for input_data_type; None clears it.
        Raises ArgumentError when input_data_type is not expected by the protocol or data is invalid for it.
        """
        return await self.invoke(ps.SetParticipantGroupData(study_id, group_id, input_data_type, data))


class UserServiceClient(ApplicationServiceClient[us.UserServiceRequest]):
    """Create accounts and include them as participants of a study on a users endpoint."""

    def __init__(
        self,
        host: str,
        configure: Optional[Configure] = None,
        *,
        transport: Optional[RpcTransport] = None,
    ) -> None:
        super().__init__(host, create_studies_codec(us.UserServiceRequest), configure, transport=transport)

    @overload
    async def create_account(self, identity: EmailAddress) -> None:
        ...

    @overload
    async def create_account(self, identity: Username) -> Account:
        ...

    async def create_account(self, identity: Union[EmailAddress, Username]) -> Optional[Account]:
        """
        EmailAddress: a confirmation email is sent when no account exists for it yet.
        Username: raises ArgumentError when an account with the username already exists.
        """
        if isinstance(identity, EmailAddress):
            return await self.invoke(us.CreateAccountWithEmailAddress(identity))
        return await self.invoke(us.CreateAccountWithUsername(identity))

    async def create_participant(self, study_id: UUID, account_id: UUID) -> Participant:
        """Raises ArgumentError when no account with account_id exists."""
        return await self.invoke(us.CreateParticipant(study_id, account_id))

    async def get_participants_for_study(self, study_id: UUID) -> list[Participant]:
        return await self.invoke(us.GetParticipantsForStudy(study_id))

    async def invite_participant(self, study_id: UUID, email_address: EmailAddress) -> Participant:
        """Without an account for email_address, an invitation to register is sent out."""
        return await self.invoke(us.InviteParticipant(study_id, email_address))
