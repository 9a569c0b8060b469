import pathlib
import site

import pytest
from datahelper.builder import DbConnectionBuilder
from datahelper.parameters import CustomParameters

HERE = pathlib.Path(pathlib.Path(__file__).resolve()).parent
site.addsitedir(HERE)


@pytest.fixture(autouse=True)
def isolate_singletons(monkeypatch):
    """Give each test empty builder and custom parameter tables."""
    monkeypatch.setattr(DbConnectionBuilder, '_instances', {})
    monkeypatch.setattr(CustomParameters, '_instance', None)


pytest_plugins = [
    'tests.fixtures.factories',
    'tests.fixtures.sqlite',
]
