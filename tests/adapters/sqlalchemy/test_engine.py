from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from claimstack.adapters.sqlalchemy import (
    StartupError,
    configured_engine,
    is_started,
    session_factory,
    shutdown,
    startup,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_session_factory_requires_startup() -> None:
    shutdown()

    with pytest.raises(StartupError):
        session_factory()


def test_startup_and_shutdown(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    assert is_started()
    assert configured_engine() is sqlite_engine
    assert session_factory() is session_factory()

    shutdown()

    assert not is_started()
    assert configured_engine() is None


def test_second_startup_requires_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(StartupError):
        startup(engine=sqlite_engine)


def test_startup_builds_engine_from_uri() -> None:
    engine = startup(database_uri="sqlite+pysqlite:///:memory:", force=True)

    assert engine.url.drivername == "sqlite+pysqlite"
    assert configured_engine() is engine
