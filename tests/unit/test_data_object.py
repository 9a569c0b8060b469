"""Unit tests for DataObject."""
import logging

import pytest
from datahelper.builder import DbConnectionBuilder
from datahelper.data_object import DataObject
from datahelper.exceptions import InvalidArgumentError


class CustomerData(DataObject):
    pass


def test_log_calls_handlers_and_logger(caplog):
    received = []
    data = CustomerData()
    data.add_log_handler(lambda sender, message: received.append((sender, message)))

    with caplog.at_level(logging.INFO, logger='datahelper.data_object'):
        data.log('loaded 3 customers')

    assert received == [(data, 'loaded 3 customers')]
    assert 'CustomerData: loaded 3 customers' in caplog.text


def test_remove_log_handler():
    received = []
    handler = lambda sender, message: received.append(message)
    data = CustomerData()
    data.add_log_handler(handler)
    data.remove_log_handler(handler)

    data.log('ignored')

    assert received == []


def test_new_connection_uses_builder(fake_factory):
    data = CustomerData(DbConnectionBuilder(fake_factory, 'cs'))
    assert data.new_connection().connection_string == 'cs'


def test_new_connection_without_builder():
    with pytest.raises(InvalidArgumentError):
        CustomerData().new_connection()


if __name__ == '__main__':
    __import__('pytest').main([__file__])
