"""Unit tests for connection builders."""
import pytest
from datahelper.builder import DEFAULT_INSTANCE_ID, DbConnectionBuilder
from datahelper.exceptions import ConnectionBuilderError, InvalidArgumentError
from datahelper.exceptions import NotFoundError
from datahelper.providers import SqliteProviderFactory
from tests.fixtures.factories import FAKE_LOCATOR, FakeProviderFactory
from tests.fixtures.factories import NullConnectionFactory


def test_new_connection_assigns_connection_string(fake_factory):
    builder = DbConnectionBuilder(fake_factory, 'Data Source=test')
    cn = builder.new_connection()
    assert cn.connection_string == 'Data Source=test'
    assert builder.new_connection() is not cn


def test_new_connection_fails_when_factory_yields_nothing():
    builder = DbConnectionBuilder(NullConnectionFactory.get_instance(), 'x')
    with pytest.raises(ConnectionBuilderError, match="Can't create connection"):
        builder.new_connection()


@pytest.mark.parametrize(('factory', 'connection_string'), [
    (None, 'x'),
    ('fake', None),
], ids=['factory', 'connection_string'])
def test_required_arguments(factory, connection_string):
    with pytest.raises(InvalidArgumentError):
        DbConnectionBuilder(factory, connection_string)


def test_provider_name_resolved_through_registry(registry):
    registry.add_factory('fake', FAKE_LOCATOR)
    builder = DbConnectionBuilder('fake', 'x', registry=registry)
    assert builder.factory is FakeProviderFactory.get_instance()


def test_empty_explicit_registry_is_not_replaced(registry):
    assert len(registry) == 0
    with pytest.raises(NotFoundError):
        DbConnectionBuilder('sqlite', 'sqlite://', registry=registry)


def test_provider_name_resolved_through_process_registry(sqlite_url):
    builder = DbConnectionBuilder('sqlite', sqlite_url)
    assert builder.factory is SqliteProviderFactory.get_instance()
    assert builder.connection_string == sqlite_url


def test_instance_before_creation_is_not_found():
    with pytest.raises(NotFoundError):
        DbConnectionBuilder.instance()
    with pytest.raises(NotFoundError):
        DbConnectionBuilder.instance(instance_id='reports')


def test_instance_first_creation_wins(fake_factory):
    first = DbConnectionBuilder.instance(fake_factory, 'first')

    assert DbConnectionBuilder.instance() is first
    assert DbConnectionBuilder.instance(instance_id=DEFAULT_INSTANCE_ID) is first
    assert DbConnectionBuilder.instance(fake_factory, 'second') is first
    assert DbConnectionBuilder.instance('does-not-exist', 'third') is first
    assert first.connection_string == 'first'


def test_named_instances_are_independent(fake_factory):
    default = DbConnectionBuilder.instance(fake_factory, 'a')
    reports = DbConnectionBuilder.instance(fake_factory, 'b', instance_id='reports')

    assert default is not reports
    assert DbConnectionBuilder.instance(instance_id='reports').connection_string == 'b'
    assert DbConnectionBuilder.instances() == [DEFAULT_INSTANCE_ID, 'reports']


def test_failed_creation_is_not_stored():
    with pytest.raises(InvalidArgumentError):
        DbConnectionBuilder.instance(None, 'x')
    with pytest.raises(NotFoundError):
        DbConnectionBuilder.instance()


if __name__ == '__main__':
    __import__('pytest').main([__file__])
