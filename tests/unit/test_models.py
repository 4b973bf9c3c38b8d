"""Tests for tobacco_watch.core.models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from tobacco_watch.core.models import (
    AdviceStatus,
    NewPrice,
    PriceRecord,
    ProviderType,
    ResearchEntry,
    ScrapedPrice,
    utcnow,
)


class TestScrapedPrice:
    def test_valid(self, make_scraped):
        p = make_scraped()
        assert p.price == 85000.0
        assert p.quality == "Standard"

    @pytest.mark.parametrize("price", [0, -1, -85000.0])
    def test_non_positive_price_rejected(self, make_scraped, price):
        with pytest.raises(ValidationError, match="price must be > 0"):
            make_scraped(price=price)

    @pytest.mark.parametrize("price", [float("inf"), float("nan")])
    def test_non_finite_price_rejected(self, make_scraped, price):
        with pytest.raises(ValidationError, match="price must"):
            make_scraped(price=price)

    def test_empty_source_rejected(self, make_scraped):
        with pytest.raises(ValidationError, match="source must not be empty"):
            make_scraped(source="  ")

    def test_frozen(self, make_scraped):
        p = make_scraped()
        with pytest.raises(ValidationError):
            p.price = 1.0

    def test_stamped_source(self, make_scraped):
        p = make_scraped(source="BAPPEBTI Info Harga", quality="Standard")
        assert p.stamped_source == "BAPPEBTI Info Harga (Scraped: Standard)"


class TestNewPrice:
    def test_defaults(self):
        p = NewPrice(region="Jember", price=85000, source="Manual Input")
        assert p.unit == "kg"
        assert p.recorded_at.tzinfo is not None

    def test_empty_region_rejected(self):
        with pytest.raises(ValidationError, match="region must not be empty"):
            NewPrice(region="", price=1, source="x")

    def test_from_scraped_normalizes(self, make_scraped, fixed_now):
        scraped = make_scraped(quality="News", source="News Portal Scraper")
        p = NewPrice.from_scraped(scraped)
        assert p.region == "Jember"
        assert p.unit == "kg"
        assert p.source == "News Portal Scraper (Scraped: News)"
        assert p.recorded_at == fixed_now


class TestPriceRecord:
    def test_frozen(self, fixed_now):
        r = PriceRecord(
            id=1,
            region="Jember",
            price=85000,
            source="x",
            recorded_at=fixed_now,
            created_at=fixed_now,
        )
        with pytest.raises(ValidationError):
            r.region = "Malang"


class TestResearchEntry:
    def test_base_price_positive(self):
        with pytest.raises(ValidationError):
            ResearchEntry(base_price=0, date_checked="2024-09-15", source_label="x")


class TestEnums:
    def test_provider_type_values(self):
        assert ProviderType("bappebti") is ProviderType.BAPPEBTI
        assert str(ProviderType.RESEARCH) == "research"

    def test_advice_status_values(self):
        assert {s.value for s in AdviceStatus} == {
            "optimal",
            "good",
            "caution",
            "not_recommended",
        }


def test_utcnow_is_aware():
    now = utcnow()
    assert now.tzinfo is not None
    assert now.utcoffset() == timezone.utc.utcoffset(datetime.now())
