# tests/conftest.py
"""Global PyTest fixtures for the test-suite.

Every test gets a wall-clock limit so a Task that never settles (a stuck
race branch, a prompt waiting on stdin) fails instead of hanging the run.
"""

from __future__ import annotations

import logging
import signal
from pathlib import Path
from types import FrameType
from typing import Callable, Generator

import pytest

from summon.generators.component import ComponentAnswers, ReactComponentAnswers
from summon.listeners import RecordingListener


DEFAULT_TEST_TIMEOUT_SECONDS = 20.0


def _build_timeout_handler(
    timeout_seconds: float,
) -> Callable[[int, FrameType | None], None]:
    """Create SIGALRM handler that fails the test when timeout is reached."""

    def _handle_timeout(signum: int, frame: FrameType | None) -> None:
        pytest.fail(
            f"Test exceeded {timeout_seconds:.0f}s timeout (includes setup/teardown)",
            pytrace=True,
        )

    return _handle_timeout


def _resolve_timeout_seconds(request: pytest.FixtureRequest) -> float:
    """Return timeout for current test (marker override allowed)."""
    marker = request.node.get_closest_marker("timeout")
    if marker is None:
        return DEFAULT_TEST_TIMEOUT_SECONDS

    raw_value = marker.kwargs.get("seconds", marker.args[0] if marker.args else None)
    if raw_value is None:
        pytest.fail("timeout marker requires seconds argument", pytrace=True)

    seconds = float(raw_value)
    if seconds <= 0:
        pytest.fail("timeout marker must be positive seconds", pytrace=True)

    return seconds


@pytest.fixture(autouse=True)
def per_test_timeout(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Fail any test that runs longer than the default timeout."""
    if not hasattr(signal, "SIGALRM") or not hasattr(signal, "setitimer"):
        yield
        return

    timeout_seconds = _resolve_timeout_seconds(request)
    handler = _build_timeout_handler(timeout_seconds)
    previous_handler = signal.getsignal(signal.SIGALRM)
    signal.signal(signal.SIGALRM, handler)
    signal.setitimer(signal.ITIMER_REAL, timeout_seconds)
    try:
        yield
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0.0)
        signal.signal(signal.SIGALRM, previous_handler)


@pytest.fixture(autouse=True)
def reset_root_logging() -> Generator[None, None, None]:
    """Undo ``configure_logging`` calls made by CLI tests."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty project directory for live interpreter tests."""
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def recording_listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def button_answers() -> ReactComponentAnswers:
    """Answers for the canonical Button component: styles on, stories off."""
    return ReactComponentAnswers(
        component_path="src/components/Button",
        with_styles=True,
        with_stories=False,
    )


@pytest.fixture
def all_features() -> dict[str, object]:
    fields = ComponentAnswers.model_fields
    return {name: True for name in fields if name != "component_path"}
