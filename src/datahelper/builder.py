"""
Connection builders: a provider factory plus a connection string.

Named builder instances are kept for the life of the process. The first
call that creates an instance id wins; later calls with the same id return
that builder and ignore their arguments.
"""
import logging
import threading

from datahelper.connection import DbConnection
from datahelper.exceptions import ConnectionBuilderError, InvalidArgumentError
from datahelper.exceptions import NotFoundError
from datahelper.providers import DbProviderFactory, ProviderFactories
from datahelper.providers import provider_registry
from datahelper.types import DEFAULT_INSTANCE_ID

__all__ = ['DbConnectionBuilder', 'DEFAULT_INSTANCE_ID']

logger = logging.getLogger(__name__)


class DbConnectionBuilder:
    """Creates connections for one provider factory and connection string.
    """

    _instances: dict[str, 'DbConnectionBuilder'] = {}
    _lock = threading.RLock()

    def __init__(self, factory: DbProviderFactory | str, connection_string: str,
                 registry: ProviderFactories | None = None) -> None:
        """Initialize a builder

        Args:
            factory: A provider factory, or the invariant name of a registered provider
            connection_string: Connection string assigned to every new connection
            registry: Registry used to resolve a provider name, by default the process registry
        """
        if factory is None:
            raise InvalidArgumentError('factory is required')
        if connection_string is None:
            raise InvalidArgumentError('connection_string is required')
        if isinstance(factory, str):
            if registry is None:
                registry = provider_registry
            factory = registry.get_factory(factory)
        self._factory = factory
        self._connection_string = connection_string

    @property
    def factory(self) -> DbProviderFactory:
        return self._factory

    @property
    def connection_string(self) -> str:
        return self._connection_string

    def new_connection(self) -> DbConnection:
        """Return a new, closed connection carrying the connection string.
        """
        cn = self._factory.create_connection()
        if cn is None:
            raise ConnectionBuilderError("Can't create connection")
        cn.connection_string = self._connection_string
        return cn

    @classmethod
    def instance(cls, factory: DbProviderFactory | str | None = None,
                 connection_string: str | None = None,
                 instance_id: str = DEFAULT_INSTANCE_ID) -> 'DbConnectionBuilder':
        """Get the named builder, creating it on first use.

        Called without `factory` and `connection_string`, the instance must
        already exist or NotFoundError is raised.
        """
        with cls._lock:
            if instance_id in cls._instances:
                return cls._instances[instance_id]
            if factory is None and connection_string is None:
                raise NotFoundError(f'Instance {instance_id} is not created.')
            builder = cls(factory, connection_string)
            cls._instances[instance_id] = builder
            logger.debug(f'Created connection builder {instance_id} for {type(builder.factory).__name__}')
            return builder

    @classmethod
    def instances(cls) -> list[str]:
        """Ids of the builders created so far."""
        with cls._lock:
            return list(cls._instances)
