"""Custom exception hierarchy for tobacco-watch."""

from typing import Any


class TobaccoWatchError(Exception):
    """Base exception for all tobacco-watch errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(TobaccoWatchError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        field: str: the config field that failed validation
        value: Any: the invalid value
    """


class AcquisitionError(TobaccoWatchError):
    """A price provider failed outright.

    Policy: the coordinator logs it and advances to the next provider.

    Context keys:
        provider: str: name of the failing provider
    """


class TransportError(AcquisitionError):
    """Network failure while fetching a single source URL.

    Policy: log and skip the URL. Other URLs of the same provider still count.

    Context keys:
        url: str: the URL that was being fetched
        status_code: int | None: HTTP status if a response arrived
    """


class ParsingError(AcquisitionError):
    """A fetched document could not be parsed at all.

    Individual malformed rows are not errors; they are dropped silently.

    Context keys:
        source_url: str: where the document came from
        reason: str: why parsing failed
    """


class AggregateFailureError(AcquisitionError):
    """Every configured provider failed or returned nothing.

    With the research provider at the end of the chain this is unreachable;
    seeing it means the chain is misconfigured. Logged at CRITICAL.

    Context keys:
        providers: list[str]: the providers that were tried
    """


class RegionNotFoundError(TobaccoWatchError):
    """No price record exists for the requested region.

    Context keys:
        region: str: the region that was looked up
    """


class StorageError(TobaccoWatchError):
    """Database operation failed.

    Policy: raise. The coordinator catches it per record and skips that record.

    Context keys:
        operation: str: "insert", "query", "migrate", etc.
        table: str: the table involved
    """


class WeatherError(TobaccoWatchError):
    """Weather API unavailable, unauthorized or returned garbage.

    Context keys:
        region: str: the region that was requested
        status_code: int | None: HTTP status code if applicable
    """
