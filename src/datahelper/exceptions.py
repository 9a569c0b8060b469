"""
Exception classes raised by the datahelper package.
"""


class DataHelperError(Exception):
    """Base class for all datahelper errors.
    """


class InvalidArgumentError(DataHelperError, ValueError):
    """A required argument was missing or None.
    """


class NotFoundError(DataHelperError, LookupError):
    """A named provider, builder instance or custom parameter is not registered.
    """


class DuplicateRegistrationError(DataHelperError):
    """A provider name was registered twice.
    """


class MalformedLocatorError(DataHelperError, ValueError):
    """A factory locator does not match `<type name>, <module name>`.
    """


class FactoryResolutionError(DataHelperError):
    """Loading, checking or instantiating a provider factory failed.

    The underlying error is available as `__cause__`.
    """


class PatternTimeoutError(DataHelperError, TimeoutError):
    """Placeholder pattern evaluation exceeded its time budget.
    """


class ConnectionBuilderError(DataHelperError):
    """A provider factory did not produce a connection.
    """
