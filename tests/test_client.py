from __future__ import annotations

import json
import logging
from uuid import UUID

import anyio
import pytest

from servicerpc.core.config import ClientConfig, TransportConfig
from servicerpc.rpc.client import CONTENT_TYPE, ApplicationServiceClient
from servicerpc.rpc.envelope import TYPE_KEY
from servicerpc.rpc.protocol import (
    ArgumentError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    RemoteError,
    RpcResponse,
    StateError,
    TransportError,
)
from servicerpc.studies import StudyServiceClient, create_studies_codec
from servicerpc.studies.application import StudyServiceRequest
from servicerpc.studies.application import user_service as us
from servicerpc.studies.domain import StudyOwner, StudyStatus

from stubs import StubTransport, json_response

pytestmark = pytest.mark.anyio

STUDY_ID = UUID("11111111-1111-1111-1111-111111111111")
STATUS_BODY = {"id": str(STUDY_ID), "name": "Study A"}


def make_client(transport: StubTransport, configure=None) -> StudyServiceClient:
    return StudyServiceClient("studies.example.com", configure, transport=transport)


async def test_success_returns_decoded_result() -> None:
    transport = StubTransport(json_response(STATUS_BODY))
    client = make_client(transport)

    status = await client.get_study_status(STUDY_ID)

    assert status == client.codec.decode(json.dumps(STATUS_BODY), StudyStatus)
    assert status.id == STUDY_ID


async def test_one_message_posted_as_json() -> None:
    transport = StubTransport(json_response(STATUS_BODY))
    client = make_client(transport)

    await client.go_live(STUDY_ID)

    assert len(transport.sessions) == 1
    [(body, content_type)] = transport.sessions[0].sent
    assert content_type == CONTENT_TYPE == "application/json"
    assert json.loads(body)[TYPE_KEY] == "GoLive"
    assert transport.opened[0][0] == "studies.example.com"


@pytest.mark.parametrize("status_code", [400, 403, 404, 409, 500, 503])
async def test_error_status_raises_remote_error_with_payload(status_code: int) -> None:
    payload = {"error": {"code": "Boom", "message": "it broke"}, "detail": 7}
    transport = StubTransport(json_response(payload, status_code))
    client = make_client(transport)

    with pytest.raises(RemoteError) as info:
        await client.get_study_status(STUDY_ID)

    assert info.value.status_code == status_code
    assert info.value.code == "Boom"
    assert info.value.message == "it broke"
    assert info.value.payload == payload
    assert transport.sessions[0].close_calls == 1


async def test_not_found_is_an_argument_error() -> None:
    transport = StubTransport(json_response({"error": "NotFound"}, 400))
    client = make_client(transport)

    with pytest.raises(ArgumentError) as info:
        await client.get_study_status(STUDY_ID)

    assert info.value.code == "NotFound"
    assert info.value.payload == {"error": "NotFound"}


async def test_conflict_is_a_state_error() -> None:
    transport = StubTransport(json_response({"error": "Study is not live"}, 409))
    with pytest.raises(StateError):
        await make_client(transport).deploy_participant_group(STUDY_ID, frozenset())


@pytest.mark.parametrize(
    ("code", "status_code", "kind"),
    [
        ("IllegalStateException", 400, StateError),
        ("IllegalArgumentException", 500, ArgumentError),
        ("StateError", 422, StateError),
        ("Unavailable", 503, RemoteError),
    ],
)
async def test_remote_code_decides_classification(code: str, status_code: int, kind: type) -> None:
    transport = StubTransport(json_response({"error": {"code": code, "message": "m"}}, status_code))
    with pytest.raises(RemoteError) as info:
        await make_client(transport).go_live(STUDY_ID)
    assert type(info.value) is kind


async def test_non_json_error_body_keeps_text() -> None:
    transport = StubTransport(RpcResponse(502, b"Bad Gateway"))
    with pytest.raises(RemoteError) as info:
        await make_client(transport).go_live(STUDY_ID)
    assert type(info.value) is RemoteError
    assert info.value.message == "Bad Gateway"
    assert info.value.payload == {}


async def test_remote_error_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    transport = StubTransport(json_response({"error": "NotFound"}, 404))
    with caplog.at_level(logging.WARNING, logger="servicerpc.rpc.client"):
        with pytest.raises(ArgumentError):
            await make_client(transport).go_live(STUDY_ID)
    assert "GoLive" in caplog.text


async def test_transport_failure_raises_transport_error_and_closes_once() -> None:
    cause = ConnectionRefusedError("refused")
    transport = StubTransport(error=cause)

    with pytest.raises(TransportError) as info:
        await make_client(transport).get_study_status(STUDY_ID)

    assert info.value.__cause__ is cause
    assert len(transport.sessions) == 1
    assert transport.sessions[0].close_calls == 1


async def test_transport_error_from_session_is_not_rewrapped() -> None:
    error = TransportError("TLS handshake failed")
    transport = StubTransport(error=error)
    with pytest.raises(TransportError) as info:
        await make_client(transport).go_live(STUDY_ID)
    assert info.value is error
    assert transport.sessions[0].close_calls == 1


async def test_close_failure_after_success_raises_transport_error() -> None:
    cause = OSError("connection reset while closing")
    transport = StubTransport(json_response(STATUS_BODY), close_error=cause)

    with pytest.raises(TransportError) as info:
        await make_client(transport).get_study_status(STUDY_ID)

    assert info.value.__cause__ is cause
    assert transport.sessions[0].close_calls == 1


async def test_close_failure_does_not_mask_send_failure(caplog: pytest.LogCaptureFixture) -> None:
    cause = ConnectionRefusedError("refused")
    transport = StubTransport(error=cause, close_error=OSError("close failed"))

    with caplog.at_level(logging.WARNING, logger="servicerpc.rpc.client"):
        with pytest.raises(TransportError) as info:
            await make_client(transport).get_study_status(STUDY_ID)

    assert info.value.__cause__ is cause
    assert "close failed" in caplog.text
    assert transport.sessions[0].close_calls == 1


async def test_close_failure_does_not_mask_remote_error() -> None:
    transport = StubTransport(json_response({"error": "NotFound"}, 404), close_error=OSError("close failed"))
    with pytest.raises(ArgumentError):
        await make_client(transport).go_live(STUDY_ID)
    assert transport.sessions[0].close_calls == 1


async def test_failing_configure_is_not_a_transport_error() -> None:
    cause = KeyError("STUDIES_TOKEN")

    def configure(config: TransportConfig) -> None:
        raise cause

    client = StudyServiceClient("studies.example.com", configure)
    with pytest.raises(ConfigurationError) as info:
        await client.go_live(STUDY_ID)

    assert not isinstance(info.value, TransportError)
    assert info.value.__cause__ is cause


async def test_open_failure_raises_transport_error() -> None:
    class Unreachable:
        def open(self, host, configure=None):
            raise OSError("no route to host")

    client = StudyServiceClient("studies.example.com", transport=Unreachable())
    with pytest.raises(TransportError):
        await client.go_live(STUDY_ID)


async def test_undecodable_response_raises_decode_error() -> None:
    transport = StubTransport(json_response({"unexpected": True}))
    with pytest.raises(DecodeError):
        await make_client(transport).get_study_status(STUDY_ID)
    assert transport.sessions[0].close_calls == 1


async def test_encode_error_opens_no_session() -> None:
    transport = StubTransport(json_response(STATUS_BODY))
    client = make_client(transport)
    with pytest.raises(EncodeError):
        await client.invoke(us.GetParticipantsForStudy(STUDY_ID))
    assert transport.sessions == []


async def test_unit_result() -> None:
    from servicerpc.studies import UserServiceClient
    from servicerpc.studies.domain import EmailAddress

    transport = StubTransport(RpcResponse(200, b""))
    client = UserServiceClient("users.example.com", transport=transport)
    assert await client.create_account(EmailAddress("a@example.com")) is None
    assert transport.sent_envelopes()[0][TYPE_KEY] == "CreateAccountWithEmailAddress"


async def test_cancellation_closes_session() -> None:
    block = anyio.Event()
    transport = StubTransport(json_response(STATUS_BODY), block=block)
    client = make_client(transport)

    async with anyio.create_task_group() as tg:
        tg.start_soon(client.get_study_status, STUDY_ID)
        while not transport.sessions or not transport.sessions[0].sent:
            await anyio.sleep(0)
        tg.cancel_scope.cancel()

    assert transport.sessions[0].close_calls == 1


async def test_concurrent_calls_use_separate_sessions() -> None:
    transport = StubTransport(json_response(STATUS_BODY))
    client = make_client(transport)
    results = []

    async def call() -> None:
        results.append(await client.get_study_status(STUDY_ID))

    async with anyio.create_task_group() as tg:
        for _ in range(5):
            tg.start_soon(call)

    assert len(results) == 5
    assert len(transport.sessions) == 5
    assert all(s.close_calls == 1 and len(s.sent) == 1 for s in transport.sessions)


async def test_configure_is_handed_to_transport() -> None:
    def configure(config: TransportConfig) -> None:
        config.headers["Authorization"] = "Bearer t"

    transport = StubTransport(json_response(STATUS_BODY))
    await make_client(transport, configure).create_study(StudyOwner(), "Study A")
    assert transport.opened == [("studies.example.com", configure)]


def test_generic_client_can_be_built_directly() -> None:
    client = ApplicationServiceClient[StudyServiceRequest](
        "studies.example.com", create_studies_codec(StudyServiceRequest), transport=StubTransport()
    )
    assert client.host == "studies.example.com"
    assert client.config == ClientConfig("studies.example.com")


@pytest.mark.parametrize("host", ["", "https://studies.example.com", "studies.example.com:443", "example.com/api"])
def test_host_must_be_bare_domain(host: str) -> None:
    with pytest.raises(ValueError):
        StudyServiceClient(host, transport=StubTransport())


def test_config_is_immutable() -> None:
    config = ClientConfig("studies.example.com")
    with pytest.raises(AttributeError):
        config.host = "other.example.com"  # type: ignore[misc]
