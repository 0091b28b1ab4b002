"""
Unit tests for the stubby4j child-process manager.
"""

import socket
import sys

import pytest

import adapters.stubby_process as stubby_process_module
from adapters.stubby_process import StubbyProcessFactory, StubbyProcessManager
from core.config import AppSettings
from core.domain.errors import ServerStartupError

PARAMS = {"clientport": "8882", "adminport": "8889"}


def test_command_line(tmp_path):
    jar = tmp_path / "stubby4j.jar"
    settings = AppSettings(stubby_jar=jar, java_executable="java")
    manager = StubbyProcessManager(tmp_path / "stubs.yaml", PARAMS, settings)

    assert manager.command() == [
        "java",
        "-jar",
        str(jar),
        "--data",
        str(tmp_path / "stubs.yaml"),
        "--clientport",
        "8882",
        "--adminport",
        "8889",
    ]
    assert (manager.client_port, manager.admin_port) == (8882, 8889)


def test_missing_jar_setting():
    manager = StubbyProcessManager(None, PARAMS, AppSettings(stubby_jar=None))
    with pytest.raises(ServerStartupError, match="not configured"):
        manager.start()


def test_missing_jar_file(tmp_path):
    manager = StubbyProcessManager(None, PARAMS, AppSettings(stubby_jar=tmp_path / "nope.jar"))
    with pytest.raises(ServerStartupError, match="jar not found"):
        manager.start()


def test_missing_config_file(tmp_path):
    jar = tmp_path / "stubby4j.jar"
    jar.write_bytes(b"")
    manager = StubbyProcessManager(tmp_path / "missing.yaml", PARAMS, AppSettings(stubby_jar=jar))
    with pytest.raises(ServerStartupError, match="config not found"):
        manager.start()


def test_process_exiting_early(tmp_path):
    # The Python interpreter rejects `-jar`, so the child exits immediately.
    jar = tmp_path / "stubby4j.jar"
    jar.write_bytes(b"")
    settings = AppSettings(stubby_jar=jar, java_executable=sys.executable, startup_timeout_seconds=10)
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        free_port = str(s.getsockname()[1])
    manager = StubbyProcessManager(None, {"clientport": free_port, "adminport": "8889"}, settings)

    with pytest.raises(ServerStartupError, match="exited early"):
        manager.start()
    assert not manager.running


def test_stop_without_start_is_noop():
    manager = StubbyProcessManager(None, PARAMS, AppSettings())
    manager.stop()
    manager.stop()


def test_factory_converts_path(tmp_path):
    manager = StubbyProcessFactory(AppSettings()).construct(str(tmp_path / "a.yaml"), PARAMS)
    assert isinstance(manager, StubbyProcessManager)
    assert manager.client_port == 8882


class _RunningProcess:
    pid = 4242

    def __init__(self, *args, **kwargs):
        self.terminated = False

    def poll(self):
        return 0 if self.terminated else None

    def terminate(self):
        self.terminated = True

    def wait(self, timeout=None):
        return 0


def test_readiness_polls_local_host(tmp_path, monkeypatch):
    jar = tmp_path / "stubby4j.jar"
    jar.write_bytes(b"")
    polled = []

    def fake_port_open(host, port):
        polled.append((host, port))
        return True

    monkeypatch.setattr(stubby_process_module.subprocess, "Popen", _RunningProcess)
    monkeypatch.setattr(stubby_process_module, "_port_open", fake_port_open)
    settings = AppSettings(stubby_jar=jar, default_host="stubs.example.test")
    manager = StubbyProcessManager(None, PARAMS, settings)

    manager.start()

    assert polled == [("localhost", 8882)]
    assert manager.running
    manager.stop()
    assert not manager.running


def test_wait_without_process_raises():
    manager = StubbyProcessManager(None, PARAMS, AppSettings())
    with pytest.raises(ServerStartupError, match="not launched"):
        manager._wait_until_ready()
