#!/usr/bin/env python3
"""Pytest fixtures for selclip tests.

Provides in-memory selection bindings for the orchestration tests and an
Xvfb display for the X11 integration tests.
"""

import os
import subprocess
import threading
import time
from collections.abc import Generator

import pytest

from selclip import binding as binding_module
from selclip.binding import READ_UNAVAILABLE, READ_UNSUPPORTED, WRITE_READY
from selclip.handles import sync_status

KNOWN_TARGETS = ("UTF8_STRING", "image/png")


class FakeBinding:
    """In-memory selection where the last successful writer owns the clipboard.

    Attributes:
        contents: Data served by the current owner, keyed by target.
        test_status: Value returned by test().
        unavailable: If True, reads report READ_UNAVAILABLE.
        acquire_status: Status reported through sync_status() by write().
        final_status: Value returned by write() after ownership is lost.
        silent: Targets whose writes never report a status until released.
        fail_with: Exception raised by write() instead of serving.
    """

    def __init__(self) -> None:
        self.contents: dict[str, bytes] = {}
        self.test_status = 0
        self.unavailable = False
        self.acquire_status = WRITE_READY
        self.final_status = 0
        self.silent: set[str] = set()
        self.fail_with: Exception | None = None
        self.read_calls: list[str] = []
        self.write_calls: list[tuple[str, bytes | None]] = []
        self.released = threading.Event()
        self._lock = threading.Lock()
        self._owner: threading.Event | None = None

    def test(self) -> int:
        return self.test_status

    def read(self, target: str) -> tuple[int, bytearray | None]:
        self.read_calls.append(target)
        if self.unavailable:
            return READ_UNAVAILABLE, None
        if target not in KNOWN_TARGETS:
            return READ_UNSUPPORTED, None
        with self._lock:
            data = self.contents.get(target)
        if data is None:
            return 0, None
        return len(data), bytearray(data)

    def write(self, target: str, data: bytes | None, handle: int) -> int:
        self.write_calls.append((target, data))
        if self.fail_with is not None:
            raise self.fail_with
        if target in self.silent:
            self.released.wait()
            return self.final_status
        if self.acquire_status < 0:
            sync_status(handle, self.acquire_status)
            return self.acquire_status

        lost = threading.Event()
        with self._lock:
            previous, self._owner = self._owner, lost
            self.contents = {target: data or b""}
        if previous is not None:
            previous.set()
        sync_status(handle, self.acquire_status)
        lost.wait()
        return self.final_status

    def revoke(self) -> None:
        """Make the current owner lose the selection, keeping its contents."""
        with self._lock:
            owner, self._owner = self._owner, None
        if owner is not None:
            owner.set()

    def shutdown(self) -> None:
        """Let every blocked writer return."""
        self.revoke()
        self.released.set()


class ScriptedBinding:
    """Binding whose reads return a fixed sequence, repeating the last entry.

    Entries are bytes, None for an unavailable clipboard, or an exception
    instance to raise from read().
    """

    def __init__(self, results: list[bytes | BaseException | None]) -> None:
        self._results = results
        self._lock = threading.Lock()
        self.reads = 0

    def test(self) -> int:
        return 0

    def read(self, target: str) -> tuple[int, bytes | None]:
        with self._lock:
            result = self._results[min(self.reads, len(self._results) - 1)]
            self.reads += 1
        if isinstance(result, BaseException):
            raise result
        if result is None:
            return READ_UNAVAILABLE, None
        return len(result), result

    def write(self, target: str, data: bytes | None, handle: int) -> int:
        raise NotImplementedError


@pytest.fixture
def fake_binding() -> Generator[FakeBinding, None, None]:
    """Provide a FakeBinding and release its writer threads afterwards."""
    fake = FakeBinding()
    yield fake
    fake.shutdown()


@pytest.fixture
def default_binding(fake_binding: FakeBinding) -> Generator[FakeBinding, None, None]:
    """Install fake_binding as the process default binding."""
    binding_module.set_binding(fake_binding)
    yield fake_binding
    binding_module.set_binding(None)


@pytest.fixture
def xvfb_display() -> Generator[str | None, None, None]:
    """Start Xvfb virtual display if available, yield DISPLAY string.

    Returns None if Xvfb is not available. Tests using this fixture
    should skip if the value is None.
    """
    try:
        result = subprocess.run(["which", "Xvfb"], capture_output=True, check=False)
        if result.returncode != 0:
            yield None
            return
    except FileNotFoundError:
        yield None
        return

    display = ":98"
    proc = subprocess.Popen(
        ["Xvfb", display, "-screen", "0", "1024x768x24"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    try:
        time.sleep(0.5)
        if proc.poll() is not None:
            yield None
            return
        old_display = os.environ.get("DISPLAY")
        os.environ["DISPLAY"] = display
        yield display
        if old_display is not None:
            os.environ["DISPLAY"] = old_display
        else:
            os.environ.pop("DISPLAY", None)
    finally:
        proc.terminate()
        proc.wait()
