"""
Provider factory registry.

Maps a provider invariant name (e.g. 'sqlite') to a locator string of the
form `<type name>, <module name>`. Resolving a name imports the module,
looks up the type, checks it is a DbProviderFactory and returns its
singleton from `get_instance()`.

Drivers register at import with the `register_provider` decorator:

    @register_provider('sqlite')
    class SqliteProviderFactory(SqlAlchemyProviderFactory):
        dialect = 'sqlite'

Other factories can be registered by locator:

    add_factory('duckdb', 'mypkg.factories.DuckDbFactory, mypkg.factories')
"""
import atexit
import importlib
import logging
import re
import threading
from abc import ABC, abstractmethod

import sqlalchemy as sa
from datahelper.command import DbCommand, DbParameter
from datahelper.connection import DbConnection
from datahelper.exceptions import DuplicateRegistrationError
from datahelper.exceptions import FactoryResolutionError, InvalidArgumentError
from datahelper.exceptions import MalformedLocatorError, NotFoundError
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

__all__ = [
    'DbProviderFactory',
    'SqlAlchemyProviderFactory',
    'SqliteProviderFactory',
    'PostgresProviderFactory',
    'ProviderFactories',
    'provider_registry',
    'register_provider',
    'add_factory',
    'get_factory',
    'resolve_factory',
    'parse_locator',
    'available_factories',
    'dispose_all_engines',
]

logger = logging.getLogger(__name__)

_LOCATOR = re.compile(r'^\s*([^,\s][^,]*?)\s*,\s*(\S.*?)\s*$')

# Singletons returned by DbProviderFactory.get_instance(), keyed by class
_factory_instances: dict[type, 'DbProviderFactory'] = {}
_factory_instances_lock = threading.RLock()


class DbProviderFactory(ABC):
    """Creates connections, commands and parameters for one driver family.
    """

    @classmethod
    def get_instance(cls) -> 'DbProviderFactory':
        """Return the process-wide instance of this factory class."""
        with _factory_instances_lock:
            if cls not in _factory_instances:
                _factory_instances[cls] = cls()
            return _factory_instances[cls]

    @abstractmethod
    def create_connection(self) -> DbConnection | None:
        """Return a new, closed connection with no connection string."""

    def create_command(self) -> DbCommand:
        return DbCommand()

    def create_parameter(self) -> DbParameter:
        return DbParameter()


class SqlAlchemyProviderFactory(DbProviderFactory):
    """Factory whose connection strings are SQLAlchemy URLs.

    Keeps one engine per connection string. Engines use NullPool and
    AUTOCOMMIT isolation: no pooling, no implicit transactions.
    """
    dialect: str | None = None

    def __init__(self) -> None:
        self._engines: dict[str, Engine] = {}
        self._lock = threading.RLock()

    def create_connection(self) -> DbConnection:
        return DbConnection(self)

    def get_engine(self, connection_string: str) -> Engine:
        """Get or create the engine for a connection string."""
        with self._lock:
            if connection_string in self._engines:
                return self._engines[connection_string]

            url = sa.make_url(connection_string)
            if self.dialect and url.get_backend_name() != self.dialect:
                raise InvalidArgumentError(
                    f'{type(self).__name__} expects a {self.dialect} URL, got {url.get_backend_name()}')

            engine = sa.create_engine(url, poolclass=NullPool,
                                      isolation_level='AUTOCOMMIT', echo=False)
            self._engines[connection_string] = engine
            logger.debug(f'Created new engine for {url.get_backend_name()}')
            return engine

    def dispose(self) -> None:
        with self._lock:
            for engine in self._engines.values():
                engine.dispose()
            self._engines.clear()


class ProviderFactories:
    """Registry of provider invariant name -> factory locator.

    Safe to share between threads. `available()` returns a snapshot.
    """

    def __init__(self) -> None:
        self._factories: dict[str, str] = {}
        self._lock = threading.RLock()

    def add_factory(self, invariant_name: str, locator: str) -> None:
        """Register a locator under a provider name.

        Raises DuplicateRegistrationError if the name is already registered.
        """
        if invariant_name is None or locator is None:
            raise InvalidArgumentError('Provider name and locator are required')
        with self._lock:
            if invariant_name in self._factories:
                raise DuplicateRegistrationError(
                    f'Provider {invariant_name} is already registered')
            self._factories[invariant_name] = locator
        logger.debug(f'Registered provider {invariant_name} -> {locator}')

    def register(self, invariant_name: str, factory_type: type[DbProviderFactory]) -> None:
        """Register a factory class directly."""
        self.add_factory(invariant_name, f'{factory_type.__qualname__}, {factory_type.__module__}')

    def locator(self, invariant_name: str) -> str:
        with self._lock:
            if invariant_name not in self._factories:
                raise NotFoundError(f"Can't find instance for {invariant_name}")
            return self._factories[invariant_name]

    def get_factory(self, name: str, module_name: str | None = None) -> DbProviderFactory:
        """Resolve a factory by provider name, or by type and module name.

        With one argument `name` is a registered provider name; with two it
        is a type name resolved in `module_name`.
        """
        if module_name is not None:
            return resolve_factory(name, module_name)
        return resolve_factory(*parse_locator(self.locator(name)))

    def available(self) -> list[tuple[str, str]]:
        with self._lock:
            return list(self._factories.items())

    def names(self) -> list[str]:
        with self._lock:
            return list(self._factories)

    def __contains__(self, invariant_name: str) -> bool:
        with self._lock:
            return invariant_name in self._factories

    def __len__(self) -> int:
        with self._lock:
            return len(self._factories)


def parse_locator(locator: str) -> tuple[str, str]:
    """Split `<type name>, <module name>` into its two parts.
    """
    match = _LOCATOR.match(locator)
    if match is None:
        raise MalformedLocatorError(f"'{locator}' is malformed.")
    return match.group(1), match.group(2)


def _load_type(type_name: str, module_name: str) -> type:
    module = importlib.import_module(module_name)
    if type_name.startswith(f'{module_name}.'):
        type_name = type_name[len(module_name) + 1:]
    obj = module
    for part in type_name.split('.'):
        obj = getattr(obj, part)
    return obj


def resolve_factory(type_name: str, module_name: str) -> DbProviderFactory:
    """Import `module_name`, find `type_name` and return its singleton.

    Raises FactoryResolutionError for any failure, chained to the cause.
    """
    try:
        factory_type = _load_type(type_name, module_name)
        if not (isinstance(factory_type, type) and issubclass(factory_type, DbProviderFactory)):
            raise TypeError(f'{type_name} in {module_name} is not a DbProviderFactory')

        accessor = getattr(factory_type, 'get_instance', None)
        instance = accessor() if accessor is not None else None
        if instance is None:
            raise LookupError(f'{type_name}.get_instance() returned no instance')
        return instance
    except Exception as err:
        raise FactoryResolutionError(
            f'Error getting db provider factory {type_name}, {module_name}') from err


provider_registry = ProviderFactories()


def register_provider(invariant_name: str, registry: ProviderFactories | None = None):
    """Decorator to register a factory class under a provider name.

    Usage:
        @register_provider('postgresql')
        class PostgresProviderFactory(SqlAlchemyProviderFactory):
            ...
    """
    def decorator(cls: type[DbProviderFactory]) -> type[DbProviderFactory]:
        target = registry if registry is not None else provider_registry
        target.register(invariant_name, cls)
        return cls
    return decorator


def add_factory(invariant_name: str, locator: str) -> None:
    provider_registry.add_factory(invariant_name, locator)


def get_factory(name: str, module_name: str | None = None) -> DbProviderFactory:
    return provider_registry.get_factory(name, module_name)


def available_factories() -> list[tuple[str, str]]:
    return provider_registry.available()


@register_provider('sqlite')
class SqliteProviderFactory(SqlAlchemyProviderFactory):
    """SQLite through the standard library driver, e.g. `sqlite:///app.db`."""
    dialect = 'sqlite'


@register_provider('postgresql')
class PostgresProviderFactory(SqlAlchemyProviderFactory):
    """PostgreSQL through psycopg, e.g. `postgresql+psycopg://user@host/db`."""
    dialect = 'postgresql'


def dispose_all_engines() -> None:
    """Dispose the engines of every factory singleton."""
    with _factory_instances_lock:
        for factory in _factory_instances.values():
            if isinstance(factory, SqlAlchemyProviderFactory):
                factory.dispose()
    logger.debug('All provider engines disposed')


atexit.register(dispose_all_engines)
