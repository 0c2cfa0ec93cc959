"""
Pytest configuration and fixtures for testing.

This module provides fake live reload channels, an in-memory todo store
and a fully wired application built around them.
"""

import asyncio
import time
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from todo_app import application
from todo_app.livereload.build_identity import BuildIdentity
from todo_app.livereload.registry import ConnectionRegistry
from todo_app.routing import RouterConfig
from todo_app.storage.database import Database


class FakeChannel:
    """
    In-memory `Channel` recording what it was sent.

    Args:
        fail: Raise from `send()` instead of recording.
        delay: Seconds to suspend inside `send()`.
        hang: Never return from `send()`.
    """

    def __init__(
        self, fail: bool = False, delay: float = 0, hang: bool = False
    ) -> None:
        self.messages: list[str] = []
        self.close_callbacks: list[Callable[[], None]] = []
        self.fail = fail
        self.delay = delay
        self.hang = hang
        self.closed = False

    async def send(self, message: str) -> None:
        if self.hang:
            await asyncio.Event().wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ConnectionError("channel broken")
        self.messages.append(message)

    def on_close(self, callback: Callable[[], None]) -> None:
        self.close_callbacks.append(callback)

    def close(self) -> None:
        self.closed = True
        for callback in self.close_callbacks:
            callback()


@pytest.fixture
def make_channel():
    """
    Factory for fake channels.

    Returns:
        Callable creating a `FakeChannel` with the given options.
    """
    return FakeChannel


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def db():
    """
    Provides an initialized in-memory todo store.

    Yields:
        Database: Store that is disposed after the test.
    """
    database = Database.in_memory()
    yield database
    database.dispose()


@pytest.fixture
def identity():
    return BuildIdentity(tag="build-1")


@pytest.fixture
def router_config(db, identity):
    """
    Provides a router config with known assets and build tag.

    Returns:
        RouterConfig: Config for a dev-mode server.
    """
    return RouterConfig(
        client="console.log('client');",
        styles="body { color: red; }",
        db=db,
        dev_mode=True,
        build_identity=identity,
    )


@pytest.fixture
def app(router_config):
    return application(router_config)


@pytest.fixture
def client(app):
    """
    Create a test client for the application.

    Server errors are answered by the exception handlers instead of being
    re-raised into the test.

    Returns:
        TestClient: FastAPI test client instance.
    """
    return TestClient(app, raise_server_exceptions=False)


def _wait_until(condition: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


@pytest.fixture
def wait_until():
    """
    Poll a condition that the server side satisfies in its own thread.

    Returns:
        Callable returning whether the condition became true in time.
    """
    return _wait_until


@pytest.fixture
def live_client(app):
    """
    Test client running the lifespan, with one event loop for the session.

    Every WebSocket opened through it shares the application's loop, so
    broadcasts started through a session's portal reach all of them.

    Yields:
        TestClient: Entered test client.
    """
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
