"""
Helpers over database connections: command text templates, provider
factory registry, connection builders, parameter binding and query helpers.

    import datahelper as dh

    builder = dh.DbConnectionBuilder.instance('sqlite', 'sqlite:///app.db')
    text = dh.CommandText('SELECT name FROM users WHERE id=@id')
    text.add('@id', 5)
    name = dh.select_scalar(builder.new_connection(), text, close_connection=True)
"""
__version__ = '0.1.0'

from datahelper.builder import DbConnectionBuilder
from datahelper.command import DataReader, DbCommand, DbParameter
from datahelper.command import ParameterCollection
from datahelper.command_text import PLACEHOLDER_PATTERN, CommandText
from datahelper.connection import DbConnection
from datahelper.data_object import DataObject
from datahelper.exceptions import ConnectionBuilderError, DataHelperError
from datahelper.exceptions import DuplicateRegistrationError
from datahelper.exceptions import FactoryResolutionError, InvalidArgumentError
from datahelper.exceptions import MalformedLocatorError, NotFoundError
from datahelper.exceptions import PatternTimeoutError
from datahelper.literal import sql_value, to_sql_value
from datahelper.mapping import PropertyMapping, PropertyMappings
from datahelper.mapping import reader_to_dict, reader_to_list, row_to_dict
from datahelper.mapping import to_list
from datahelper.options import ConnectionOptions, connect
from datahelper.parameters import CustomParameters, add_custom_parameter
from datahelper.parameters import add_input_output_parameter
from datahelper.parameters import add_input_parameter, add_output_parameter
from datahelper.parameters import add_parameter, get_parameter
from datahelper.parameters import get_parameter_value
from datahelper.providers import DbProviderFactory, ProviderFactories
from datahelper.providers import SqlAlchemyProviderFactory, add_factory
from datahelper.providers import available_factories, get_factory
from datahelper.providers import provider_registry, register_provider
from datahelper.query import ddl, execute, select, select_column, select_rows
from datahelper.query import select_scalar
from datahelper.types import DEFAULT_INSTANCE_ID, ConnectionState, DbType
from datahelper.types import ParameterDirection, is_null

__all__ = [
    'CommandText',
    'PLACEHOLDER_PATTERN',
    'sql_value',
    'to_sql_value',
    'DbProviderFactory',
    'SqlAlchemyProviderFactory',
    'ProviderFactories',
    'provider_registry',
    'register_provider',
    'add_factory',
    'get_factory',
    'available_factories',
    'DbConnectionBuilder',
    'DEFAULT_INSTANCE_ID',
    'DbConnection',
    'DbCommand',
    'DbParameter',
    'ParameterCollection',
    'DataReader',
    'ConnectionState',
    'DbType',
    'ParameterDirection',
    'is_null',
    'add_parameter',
    'add_input_parameter',
    'add_output_parameter',
    'add_input_output_parameter',
    'add_custom_parameter',
    'get_parameter',
    'get_parameter_value',
    'CustomParameters',
    'select_scalar',
    'select_column',
    'select',
    'select_rows',
    'ddl',
    'execute',
    'PropertyMapping',
    'PropertyMappings',
    'to_list',
    'row_to_dict',
    'reader_to_dict',
    'reader_to_list',
    'DataObject',
    'ConnectionOptions',
    'connect',
    'DataHelperError',
    'InvalidArgumentError',
    'NotFoundError',
    'DuplicateRegistrationError',
    'MalformedLocatorError',
    'FactoryResolutionError',
    'PatternTimeoutError',
    'ConnectionBuilderError',
]
