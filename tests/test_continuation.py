"""Tests for continuation mode handling."""

from urllib.parse import parse_qs, urlparse

import pytest

from conftest import BASE_URL, settle
from ragwalla.config import WebSocketConfig
from ragwalla.errors import ConfigurationError, NotConnectedError, PreconditionError
from ragwalla.models import ContinuationModeUpdated, Event
from ragwalla.realtime import AgentSession, ContinuationController


class TestContinuationController:
    """Tests for ContinuationController."""

    def test_default_mode(self):
        """Test the default mode is auto."""
        controller = ContinuationController()

        assert controller.mode == "auto"
        assert not controller.requires_approval

    def test_set_mode(self):
        """Test switching mode reports whether it changed."""
        controller = ContinuationController("auto")

        assert controller.set_mode("manual") is True
        assert controller.set_mode("manual") is False
        assert controller.requires_approval

    def test_invalid_mode(self):
        """Test unknown modes are rejected."""
        with pytest.raises(ConfigurationError):
            ContinuationController("sometimes")

        controller = ContinuationController()
        with pytest.raises(ConfigurationError):
            controller.set_mode("never")
        assert controller.mode == "auto"

    def test_messages(self):
        """Test control messages reflect the current mode and run id."""
        controller = ContinuationController("manual")

        assert controller.mode_message() == {
            "type": "set_continuation_mode",
            "continuation_mode": "manual",
        }
        assert controller.continue_message("run_7") == {
            "type": "continue_run",
            "run_id": "run_7",
        }

    def test_continue_requires_run_id(self):
        """Test an empty run id is a precondition failure."""
        with pytest.raises(PreconditionError):
            ContinuationController().continue_message("")

    def test_apply_ack(self):
        """Test a confirmed mode is adopted and a rejected one ignored."""
        controller = ContinuationController("auto")

        controller.apply_ack(ContinuationModeUpdated(mode="manual", success=True))
        assert controller.mode == "manual"

        controller.apply_ack(ContinuationModeUpdated(mode="auto", success=False))
        assert controller.mode == "manual"

        controller.apply_ack(ContinuationModeUpdated(mode="bogus"))
        assert controller.mode == "manual"


class TestSessionContinuation:
    """Tests for continuation through AgentSession."""

    @pytest.mark.asyncio
    async def test_set_mode_while_open(self, connected_session, transport_factory):
        """Test one control write while connected."""
        await connected_session.set_continuation_mode("manual")

        assert transport_factory.latest.sent_json == [
            {"type": "set_continuation_mode", "continuation_mode": "manual"}
        ]
        assert connected_session.continuation_mode == "manual"

    @pytest.mark.asyncio
    async def test_set_mode_while_closed(self, session, transport_factory):
        """Test no write while closed; the next connect carries the mode."""
        await session.set_continuation_mode("manual")

        assert transport_factory.urls == []

        await session.connect("agent_1", "session_a", "tok")

        query = parse_qs(urlparse(transport_factory.urls[0]).query)
        assert query["continuation_mode"] == ["manual"]
        assert transport_factory.latest.sent == []
        await session.disconnect()

    @pytest.mark.asyncio
    async def test_configured_mode_in_url(self, transport_factory):
        """Test the configured mode is used on first connect."""
        session = AgentSession(
            WebSocketConfig(base_url=BASE_URL, continuation_mode="manual"),
            transport_factory=transport_factory,
        )
        await session.connect("agent_1", "session_a", "tok")

        query = parse_qs(urlparse(transport_factory.urls[0]).query)
        assert query["continuation_mode"] == ["manual"]
        await session.disconnect()

    @pytest.mark.asyncio
    async def test_continue_run(self, connected_session, transport_factory):
        """Test continue_run writes one control message."""
        await connected_session.continue_run("run_1")

        assert transport_factory.latest.sent_json == [
            {"type": "continue_run", "run_id": "run_1"}
        ]

    @pytest.mark.asyncio
    async def test_continue_run_empty_id(self, connected_session, transport_factory):
        """Test an empty run id fails without writing."""
        with pytest.raises(PreconditionError):
            await connected_session.continue_run("")

        assert transport_factory.latest.sent == []

    @pytest.mark.asyncio
    async def test_continue_run_not_connected(self, session):
        """Test continue_run requires an open session."""
        with pytest.raises(NotConnectedError):
            await session.continue_run("run_1")

    @pytest.mark.asyncio
    async def test_server_ack_updates_mode(
        self, connected_session, transport_factory, recorder
    ):
        """Test continuation_mode_updated is re-emitted and adopted."""
        recorder.listen(connected_session, Event.CONTINUATION_MODE_UPDATED)
        transport_factory.latest.feed_json(
            {
                "type": "continuation_mode_updated",
                "data": {"mode": "manual", "success": True},
            }
        )
        await settle()

        ack = recorder.of(Event.CONTINUATION_MODE_UPDATED)[0]
        assert ack.mode == "manual"
        assert connected_session.continuation_mode == "manual"

    @pytest.mark.asyncio
    async def test_run_paused_then_continue(
        self, connected_session, transport_factory
    ):
        """Test resuming a paused run from a listener in manual mode."""
        await connected_session.set_continuation_mode("manual")

        async def resume(paused):
            await connected_session.continue_run(paused.run_id)

        connected_session.on(Event.RUN_PAUSED, resume)
        transport_factory.latest.feed_json(
            {"type": "run_paused", "data": {"runId": "run_5", "reason": "max_steps"}}
        )
        await settle()

        assert transport_factory.latest.sent_json[-1] == {
            "type": "continue_run",
            "run_id": "run_5",
        }
