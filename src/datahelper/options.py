"""
Connection options and `connect()`.

`connect()` accepts a ConnectionOptions object, a dict of options or the
options as keyword arguments:

    cn = connect({'provider': 'sqlite', 'connection_string': 'sqlite:///app.db'})
"""
from dataclasses import dataclass, fields
from typing import Any

from datahelper.builder import DbConnectionBuilder
from datahelper.connection import DbConnection
from datahelper.providers import provider_registry
from datahelper.types import DEFAULT_INSTANCE_ID

from libb import ConfigOptions, load_options

__all__ = ['ConnectionOptions', 'connect']


@dataclass
class ConnectionOptions(ConfigOptions):
    """Options

    provider: invariant name of a registered provider (`sqlite`, `postgresql`)
    connection_string: SQLAlchemy URL passed to the provider
    instance_id: name of the connection builder to install
    """
    provider: str = 'sqlite'
    connection_string: str = None
    instance_id: str = DEFAULT_INSTANCE_ID

    def __post_init__(self):
        if self.provider not in provider_registry:
            raise ValueError(f'provider must be one of: {provider_registry.names()}')
        if not self.connection_string:
            raise ValueError('connection_string is required')
        if not self.instance_id:
            self.instance_id = DEFAULT_INSTANCE_ID


@load_options(cls=ConnectionOptions)
def connect(options: ConnectionOptions | dict[str, Any] | str,
            config: Any | None = None, **kw: Any) -> DbConnection:
    """Install the named connection builder and return an open connection.

    The builder for `options.instance_id` is created on first use; later
    calls with the same instance id reuse it regardless of the other options.
    """
    if isinstance(options, ConnectionOptions):
        for field in fields(options):
            kw.pop(field.name, None)
    else:
        options_func = load_options(cls=ConnectionOptions)(lambda o, c: o)
        options = options_func(options, config, **kw)

    builder = DbConnectionBuilder.instance(options.provider, options.connection_string,
                                           options.instance_id)
    cn = builder.new_connection()
    cn.open()
    return cn
