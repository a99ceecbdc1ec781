"""Tests for the relay HTTP listener."""

import socket
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from lookup_overlay.core import LookupRequest
from lookup_overlay.errors import ListenerBindError
from lookup_overlay.io import RelayListener, bind_listener, create_app


@pytest.fixture
def commands():
    return MagicMock()


@pytest.fixture
def client(commands):
    return TestClient(create_app(commands))


class TestRoutes:
    def test_get_reports_ready(self, client, commands):
        response = client.get("/")

        assert response.status_code == 200
        assert response.text == "ready"
        commands.request_lookup.assert_not_called()

    def test_get_on_command_path_only_reports_ready(self, client, commands):
        response = client.get("/shutdown")

        assert response.text == "ready"
        commands.request_shutdown.assert_not_called()

    def test_lookup_post_dispatches_request(self, client, commands):
        response = client.post("/", json={"term": "食べる", "reading": "たべる", "showFrequencies": True})

        assert response.text == "ok"
        commands.request_lookup.assert_called_once_with(
            LookupRequest(term="食べる", reading="たべる", show_frequencies=True)
        )

    def test_shutdown_post(self, client, commands):
        response = client.post("/shutdown")

        assert response.text == "closing"
        commands.request_shutdown.assert_called_once_with()

    def test_hide_post(self, client, commands):
        response = client.post("/hide", content=b"")

        assert response.text == "hidden"
        commands.request_hide.assert_called_once_with()

    def test_malformed_body_is_acknowledged_without_lookup(self, client, commands):
        response = client.post("/", content=b"{not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        assert response.text == "ok"
        commands.request_lookup.assert_not_called()

    def test_body_without_term_is_ignored(self, client, commands):
        response = client.post("/", json={"reading": "ねこ"})

        assert response.text == "ok"
        commands.request_lookup.assert_not_called()

    def test_invalid_utf8_is_ignored(self, client, commands):
        response = client.post("/", content=b"\xff\xfe")

        assert response.text == "ok"
        commands.request_lookup.assert_not_called()

    def test_unknown_post_path_is_acknowledged_only(self, client, commands):
        response = client.post("/elsewhere", json={"term": "猫"})

        assert response.text == "ok"
        commands.request_lookup.assert_not_called()
        commands.request_hide.assert_not_called()
        commands.request_shutdown.assert_not_called()


class TestBinding:
    def test_port_in_use_raises_bind_error(self):
        holder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        holder.bind(("127.0.0.1", 0))
        holder.listen(1)
        port = holder.getsockname()[1]
        try:
            with pytest.raises(ListenerBindError) as excinfo:
                bind_listener("127.0.0.1", port)
            assert excinfo.value.port == port
        finally:
            holder.close()

    def test_listener_start_reports_conflict_before_serving(self):
        holder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        holder.bind(("127.0.0.1", 0))
        holder.listen(1)
        port = holder.getsockname()[1]
        try:
            listener = RelayListener(MagicMock(), host="127.0.0.1", port=port)
            with pytest.raises(ListenerBindError):
                listener.start()
        finally:
            holder.close()

    def test_free_port_binds(self):
        sock = bind_listener("127.0.0.1", 0)
        try:
            assert sock.getsockname()[0] == "127.0.0.1"
        finally:
            sock.close()
