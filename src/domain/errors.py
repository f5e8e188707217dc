"""
Domain error taxonomy for the return-distribution service.
Zero external dependencies.

Client-caused errors derive from ClientRequestError and are surfaced as 400s;
everything else deriving from DistributionError is a provider or environment
problem and is surfaced as a 500.
"""


class DistributionError(Exception):
    """Base class for every error raised by the distribution service."""


class ClientRequestError(DistributionError):
    """The caller supplied an invalid request."""


class InvalidRangeError(ClientRequestError):
    """from_date is later than to_date."""


class InvalidIntervalError(ClientRequestError):
    """The interval is not one of the recognised values."""


class UpstreamError(DistributionError):
    """The market-data provider signalled a failure or could not be reached."""


class EmptyDataError(DistributionError):
    """There are no price points to compute statistics from."""


class ConfigurationError(DistributionError):
    """Required process configuration is missing or malformed."""
