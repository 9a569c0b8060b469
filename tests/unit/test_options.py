"""Unit tests for connection options and connect()."""
import pytest
from datahelper.builder import DEFAULT_INSTANCE_ID, DbConnectionBuilder
from datahelper.options import ConnectionOptions, connect
from datahelper.types import ConnectionState


def test_init_defaults(sqlite_url):
    options = ConnectionOptions(connection_string=sqlite_url)

    assert options.provider == 'sqlite'
    assert options.instance_id == DEFAULT_INSTANCE_ID


def test_validation():
    with pytest.raises(ValueError):
        ConnectionOptions(provider='invalid', connection_string='sqlite://')

    with pytest.raises(ValueError):
        ConnectionOptions(provider='sqlite')


def test_connect_with_options(sqlite_url):
    cn = connect(ConnectionOptions(provider='sqlite', connection_string=sqlite_url))
    try:
        assert cn.state is ConnectionState.OPEN
        assert cn.dialect == 'sqlite'
        assert DbConnectionBuilder.instance().connection_string == sqlite_url
    finally:
        cn.close()


def test_connect_with_dict_installs_named_builder(sqlite_url):
    cn = connect({'provider': 'sqlite', 'connection_string': sqlite_url,
                  'instance_id': 'reports'})
    cn.close()

    assert DbConnectionBuilder.instances() == ['reports']


def test_connect_reuses_existing_builder(sqlite_url, tmp_path):
    connect({'provider': 'sqlite', 'connection_string': sqlite_url}).close()
    other = f'sqlite:///{tmp_path / "other.db"}'
    cn = connect({'provider': 'sqlite', 'connection_string': other})
    cn.close()

    assert cn.connection_string == sqlite_url


if __name__ == '__main__':
    __import__('pytest').main([__file__])
