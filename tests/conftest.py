"""Shared fixtures."""

import pytest

from sdunit.service.linux import SystemdUnitManager

from fakes import FakeExecutor, FakeStateQuery


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def state_query():
    return FakeStateQuery()


@pytest.fixture
def manager(tmp_path, executor, state_query):
    return SystemdUnitManager(
        executor=executor,
        state_query=state_query,
        system_unit_dir=tmp_path / "system",
        user_unit_dir=tmp_path / "user",
    )
