import os
import queue
import sys

import pytest

# 添加项目路径
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from animation import AnimationController  # noqa: E402
from models import EncryptionState, QpdfStatus, ToolState  # noqa: E402
from session import CrackLeafSession  # noqa: E402


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds=1.0):
        self.now += seconds


class FakeWorker:
    """Stands in for start_unlock_worker: records snapshots, hands back a queue the test fills."""

    def __init__(self):
        self.calls = []
        self.channel = None

    def __call__(self, files):
        self.calls.append(files)
        self.channel = queue.Queue()
        return self.channel


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def worker():
    return FakeWorker()


@pytest.fixture
def probe_states():
    """Path -> EncryptionState for the fake probe; unlisted paths are reported as not encrypted."""
    return {}


@pytest.fixture
def make_session(clock, worker, probe_states):
    def _make(tool_status=None):
        status = tool_status or QpdfStatus(ToolState.OK, version="11.9.0")
        return CrackLeafSession(
            probe_tool=lambda: status,
            detect=lambda path: probe_states.get(path, EncryptionState.NOT_ENCRYPTED),
            spawn_worker=worker,
            animation=AnimationController(clock=clock),
        )
    return _make


@pytest.fixture
def run_ticks(clock):
    """Advance the fake clock past the frame interval `ticks` times, updating the session each time."""
    def _run(session, ticks):
        for _ in range(ticks):
            clock.advance(1.0)
            session.update()
    return _run
