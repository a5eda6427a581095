"""
Error taxonomy for OmniEvent.

Resolution and configuration errors propagate straight to the caller.
Argument problems surface as plain ValueError / TypeError and unimplemented
adapter operations as NotImplementedError. Schema invalidity is never raised;
EventHash.valid() is advisory.
"""


class OmniEventError(Exception):
    """Base class for all OmniEvent errors."""


class MissingStrategy(OmniEventError, LookupError):
    """A provider key does not resolve to any known adapter class."""


class StrategyNotIncluded(OmniEventError, TypeError):
    """The resolved class exists but is not a Strategy subclass."""


class StrategyNotConfigured(OmniEventError, LookupError):
    """The resolved adapter class has no activation factory."""


class Unauthorized(OmniEventError, PermissionError):
    """
    The adapter could not establish a credential for the request.

    Only raised when Configuration.raise_on_unauthorized is enabled;
    otherwise unauthorized requests quietly yield no result.
    """
