"""Tests for tobacco_watch.core.exceptions."""

import pytest

from tobacco_watch.core.exceptions import (
    AcquisitionError,
    AggregateFailureError,
    ConfigError,
    ParsingError,
    RegionNotFoundError,
    StorageError,
    TobaccoWatchError,
    TransportError,
    WeatherError,
)


class TestExceptionHierarchy:
    """Verify the exception class hierarchy."""

    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigError,
            AcquisitionError,
            RegionNotFoundError,
            StorageError,
            WeatherError,
        ],
    )
    def test_top_level_subclasses(self, exc_class):
        assert issubclass(exc_class, TobaccoWatchError)

    @pytest.mark.parametrize(
        "exc_class", [TransportError, ParsingError, AggregateFailureError]
    )
    def test_acquisition_subclasses(self, exc_class):
        assert issubclass(exc_class, AcquisitionError)
        assert issubclass(exc_class, TobaccoWatchError)

    def test_region_not_found_is_not_acquisition(self):
        assert not issubclass(RegionNotFoundError, AcquisitionError)


class TestExceptionContext:
    """Verify context dict behavior."""

    def test_default_context_is_empty(self):
        err = TobaccoWatchError("boom")
        assert err.context == {}
        assert str(err) == "boom"

    def test_context_preserved(self):
        err = TransportError(
            "timeout", context={"url": "https://example.com", "status_code": None}
        )
        assert err.context["url"] == "https://example.com"
        assert err.context["status_code"] is None

    def test_catchable_as_base(self):
        with pytest.raises(TobaccoWatchError):
            raise AggregateFailureError("all providers failed")
