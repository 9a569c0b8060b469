"""
Provider factories used by registry and builder tests.

Referenced by locator, e.g.
'tests.fixtures.factories.FakeProviderFactory, tests.fixtures.factories'.
"""
from unittest.mock import MagicMock

import pytest
from datahelper.providers import DbProviderFactory, ProviderFactories

FAKE_LOCATOR = 'tests.fixtures.factories.FakeProviderFactory, tests.fixtures.factories'


class FakeProviderFactory(DbProviderFactory):
    """Creates MagicMock connections."""

    def create_connection(self):
        return MagicMock(connection_string=None)


class NullConnectionFactory(DbProviderFactory):
    """Never produces a connection."""

    def create_connection(self):
        return None


class NullInstanceFactory(DbProviderFactory):
    """Singleton accessor yields nothing."""

    @classmethod
    def get_instance(cls):
        return None

    def create_connection(self):
        return None


class NotAFactory:
    """Has the right shape but is not a DbProviderFactory."""

    @classmethod
    def get_instance(cls):
        return cls()

    def create_connection(self):
        return None


class Outer:
    class NestedFactory(FakeProviderFactory):
        pass


@pytest.fixture
def registry():
    """Empty provider registry."""
    return ProviderFactories()


@pytest.fixture
def fake_factory():
    return FakeProviderFactory.get_instance()
