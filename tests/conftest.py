"""
Shared fixtures.

``FakeEngine`` stands in for SQLAlchemy's AsyncEngine: it records every
statement, honours BEGIN/COMMIT/ROLLBACK semantics for writes staged by
call handlers, and counts borrowed and released connections.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import pytest
from fastapi.testclient import TestClient

from taskgate.config import Settings
from taskgate.service.app import create_app


CALL_PATTERN = re.compile(r"(?:CALL|FROM) ([a-z_][a-z0-9_]*)\(")
POSITIONAL_BIND = re.compile(r"p\d+")


@dataclass
class FakeCall:
    """One call as seen by a handler."""
    name: str
    args: list[Any]
    principal: Optional[int]
    limit: Optional[int]
    offset: Optional[int]
    connection: "FakeConnection"

    def stage(self, action: Callable[[], None]) -> None:
        """Register a write applied only when the transaction commits."""
        self.connection.staged.append(action)


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows

    def mappings(self) -> "FakeResult":
        return self

    def all(self) -> list[dict[str, Any]]:
        return list(self._rows)


class FakeTransaction:
    def __init__(self, connection: "FakeConnection"):
        self.connection = connection

    async def __aenter__(self) -> "FakeTransaction":
        self.connection.log.append("BEGIN")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            for action in self.connection.staged:
                action()
            self.connection.log.append("COMMIT")
            self.connection.engine.commits += 1
        else:
            self.connection.log.append("ROLLBACK")
            self.connection.engine.rollbacks += 1
        self.connection.staged.clear()
        return False


class FakeConnection:
    def __init__(self, engine: "FakeEngine"):
        self.engine = engine
        self.log: list[str] = []
        self.staged: list[Callable[[], None]] = []
        self.principal: Optional[int] = None

    async def __aenter__(self) -> "FakeConnection":
        self.engine.borrowed += 1
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.engine.released += 1
        return False

    def begin(self) -> FakeTransaction:
        return FakeTransaction(self)

    async def execute(self, statement: Any, params: Optional[dict[str, Any]] = None) -> FakeResult:
        sql = str(statement)
        params = dict(params or {})
        self.log.append(sql)
        self.engine.statements.append((sql, params))

        if "set_config" in sql:
            self.principal = int(params["principal_id"])
            return FakeResult([])

        if self.engine.delay:
            await asyncio.sleep(self.engine.delay)

        match = CALL_PATTERN.search(sql)
        assert match, f"unexpected statement: {sql}"
        name = match.group(1)
        positional = sum(1 for key in params if POSITIONAL_BIND.fullmatch(key))
        args = [params[f"p{i}"] for i in range(positional)]
        call = FakeCall(
            name=name,
            args=args,
            principal=self.principal,
            limit=params.get("limit"),
            offset=params.get("offset"),
            connection=self,
        )
        self.engine.calls.append(call)

        handler = self.engine.handlers.get(name)
        if handler is None:
            return FakeResult([])
        return FakeResult(handler(call) or [])


@dataclass
class FakeEngine:
    """In-memory AsyncEngine stand-in keyed by call name."""
    handlers: dict[str, Callable[[FakeCall], Any]] = field(default_factory=dict)
    delay: float = 0.0
    statements: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    calls: list[FakeCall] = field(default_factory=list)
    borrowed: int = 0
    released: int = 0
    commits: int = 0
    rollbacks: int = 0
    disposed: bool = False

    def connect(self) -> FakeConnection:
        return FakeConnection(self)

    async def dispose(self) -> None:
        self.disposed = True

    def calls_named(self, name: str) -> list[FakeCall]:
        return [call for call in self.calls if call.name == name]


class StoreError(Exception):
    """Stand-in for a driver error raised by the store."""


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "JWT_SECRET": "test-secret",
        "PASSWORD_SALT_ROUNDS": 4,
        "PASSWORD_PEPPER": "pepper",
        "ENV": "development",
        "LOG_LEVEL": "DEBUG",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings: Settings, engine: FakeEngine):
    return create_app(settings, engine=engine)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def authed_client(client: TestClient, app, settings: Settings) -> TestClient:
    """Client carrying a valid session cookie for user 42."""
    token = app.state.taskgate.identity.issue(42, "ada@example.com")
    client.cookies.set(settings.SESSION_COOKIE_NAME, token)
    return client
