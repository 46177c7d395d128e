"""Tests for the WebSocket broadcast manager."""

import json

import pytest

from canallock.api.websocket import WebSocketManager


class FakeConnection:
    """Records messages sent to it."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[str] = []

    async def send(self, message: str) -> None:
        if self.fail:
            raise ConnectionError("client went away")
        self.sent.append(message)


class TestWebSocketManager:
    """Test connection tracking and broadcasts."""

    @pytest.mark.asyncio
    async def test_connect_disconnect(self) -> None:
        manager = WebSocketManager()
        connection = FakeConnection()

        await manager.connect(connection)
        assert manager.connection_count == 1

        await manager.disconnect(connection)
        await manager.disconnect(connection)
        assert manager.connection_count == 0

    @pytest.mark.asyncio
    async def test_broadcast_snapshot(self) -> None:
        manager = WebSocketManager()
        first, second = FakeConnection(), FakeConnection()
        await manager.connect(first)
        await manager.connect(second)

        await manager.broadcast_snapshot({"upper_level": 26.0})

        for connection in (first, second):
            assert len(connection.sent) == 1
            message = json.loads(connection.sent[0])
            assert message["type"] == "snapshot"
            assert message["data"] == {"upper_level": 26.0}
            assert "timestamp" in message

    @pytest.mark.asyncio
    async def test_failed_connection_removed(self) -> None:
        manager = WebSocketManager()
        healthy, broken = FakeConnection(), FakeConnection(fail=True)
        await manager.connect(healthy)
        await manager.connect(broken)

        await manager.broadcast_event({"type": "gate_toggled"})

        assert manager.connection_count == 1
        assert len(healthy.sent) == 1

    @pytest.mark.asyncio
    async def test_broadcast_error(self) -> None:
        manager = WebSocketManager()
        connection = FakeConnection()
        await manager.connect(connection)

        await manager.broadcast_error("ship does not fit", error_type="configuration")

        message = json.loads(connection.sent[0])
        assert message["type"] == "error"
        assert message["data"] == {
            "message": "ship does not fit",
            "error_type": "configuration",
        }

    @pytest.mark.asyncio
    async def test_broadcast_without_clients(self) -> None:
        manager = WebSocketManager()
        await manager.broadcast_snapshot({})
        assert manager.connection_count == 0
