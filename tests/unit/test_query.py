"""Unit tests for query helper connection handling."""
import pytest
from datahelper.command_text import CommandText
from datahelper.exceptions import InvalidArgumentError
from datahelper.query import ddl, execute, select_scalar
from datahelper.types import ConnectionState


class StubConnection:
    """Records open/close calls; commands come from a mock."""

    def __init__(self, mocker, state=ConnectionState.CLOSED):
        self.state = state
        self.calls = []
        self.command = mocker.MagicMock()
        self.command.connection = self

    def open(self):
        self.calls.append('open')
        self.state = ConnectionState.OPEN

    def close(self):
        self.calls.append('close')
        self.state = ConnectionState.CLOSED

    def create_command(self, command_text=''):
        self.command.command_text = command_text
        return self.command


@pytest.fixture
def closed_cn(mocker):
    return StubConnection(mocker)


@pytest.fixture
def open_cn(mocker):
    return StubConnection(mocker, ConnectionState.OPEN)


def test_opens_closed_connection_and_leaves_it_open(closed_cn):
    closed_cn.command.execute_scalar.return_value = 1

    assert select_scalar(closed_cn, 'SELECT 1') == 1
    assert closed_cn.calls == ['open']
    assert closed_cn.state is ConnectionState.OPEN


def test_already_open_connection_is_not_reopened_or_closed(open_cn):
    ddl(open_cn, 'DELETE FROM t')
    assert open_cn.calls == []


def test_close_connection_requested(open_cn):
    ddl(open_cn, 'DELETE FROM t', close_connection=True)
    assert open_cn.calls == ['close']


def test_close_on_failure(closed_cn):
    closed_cn.command.execute_non_query.side_effect = RuntimeError('boom')

    with pytest.raises(RuntimeError, match='boom'):
        ddl(closed_cn, 'DROP TABLE t', close_connection=True)
    assert closed_cn.calls == ['open', 'close']


def test_no_close_on_failure_when_not_requested(closed_cn):
    closed_cn.command.execute_scalar.side_effect = RuntimeError('boom')

    with pytest.raises(RuntimeError):
        select_scalar(closed_cn, 'SELECT 1')
    assert closed_cn.calls == ['open']


def test_command_text_passed_through(open_cn):
    text = CommandText('SELECT @a')
    text.add('@a', 1)
    select_scalar(open_cn, text)
    assert open_cn.command.command_text is text


def test_execute_uses_command_connection(closed_cn):
    closed_cn.command.execute_non_query.return_value = 3

    assert execute(closed_cn.command, close_connection=True) == 3
    assert closed_cn.calls == ['open', 'close']


def test_missing_connection_or_command():
    with pytest.raises(InvalidArgumentError):
        select_scalar(None, 'SELECT 1')
    with pytest.raises(InvalidArgumentError):
        execute(None)


if __name__ == '__main__':
    __import__('pytest').main([__file__])
