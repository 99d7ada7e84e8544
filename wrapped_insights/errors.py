"""Error taxonomy for the wrapped analytics engine"""


class WrappedInsightsError(Exception):
    """Base class for all engine errors"""


class InsufficientDataError(WrappedInsightsError):
    """
    A computation has no qualifying input.

    Components resolve this to documented defaults instead of raising it;
    only the snapshot loader raises it, for an input file with nothing in it.
    """


class MissingOptionalFieldError(WrappedInsightsError):
    """
    An optional upstream field needed by one sub-computation is absent.

    Raised by the component, caught by the aggregator, which omits that
    sub-result and carries on with the others.
    """

    def __init__(self, component: str, field: str, message: str = ""):
        self.component = component
        self.field = field
        super().__init__(message or f"{component}: '{field}' is unavailable")


class ConfigurationError(WrappedInsightsError, ValueError):
    """A tunable threshold or tier table is malformed. Always fatal."""
