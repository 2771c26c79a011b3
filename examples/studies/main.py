"""
Client composition: one client object per remote service, all on the same host.
Run against a studies backend: STUDIES_HOST=studies.example.com python main.py
"""
import asyncio
import logging
import os
from uuid import uuid4

from servicerpc import ArgumentError, StateError, TransportConfig
from servicerpc.studies import ParticipantServiceClient, StudyServiceClient
from servicerpc.studies.domain import (
    AssignParticipantDevices,
    EmailAddress,
    StudyInvitation,
    StudyOwner,
    StudyProtocolSnapshot,
)

HOST = os.getenv("STUDIES_HOST", "localhost")
TOKEN = os.getenv("STUDIES_TOKEN", "")


def configure(config: TransportConfig) -> None:
    """Auth header and a deadline; local development runs without TLS."""
    if TOKEN:
        config.headers["Authorization"] = f"Bearer {TOKEN}"
    config.timeout = 10.0
    if HOST == "localhost":
        config.scheme = "http"
        config.port = 8080


async def main() -> None:
    studies = StudyServiceClient(HOST, configure)
    participants = ParticipantServiceClient(HOST, configure)

    owner = StudyOwner()
    study = await studies.create_study(owner, "Sleep study", StudyInvitation("Sleep study", "Two weeks of sleep tracking"))
    try:
        await studies.go_live(study.id)
    except StateError as e:
        logging.info("Not live yet: %s", e.message)

    protocol = StudyProtocolSnapshot(id=uuid4(), owner_id=owner.id, name="Sleep tracking")
    await studies.set_protocol(study.id, protocol)
    await studies.go_live(study.id)

    participant = await participants.add_participant(study.id, EmailAddress("participant@example.com"))
    try:
        group = await participants.deploy_participant_group(
            study.id, {AssignParticipantDevices(participant.id, frozenset({"Smartphone"}))}
        )
    except ArgumentError as e:
        logging.error("Deployment rejected: %s", e.message)
        return
    logging.info("Deployed group %s", group.id)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
