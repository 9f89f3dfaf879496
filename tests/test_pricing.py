"""Tests for offer applicability, discount rounding and price display."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

from souq.core.pricing import (OfferStatus, best_offer_for, derive_offer_status,
                               discounted_amount, effective_offer_status,
                               format_price, is_offer_applicable, price_display)

TODAY = date(2026, 3, 15)


@dataclass
class FakeOffer:
    id: int
    discount_percentage: int
    start_date: date
    end_date: date
    status: str = "active"
    product_ids: list[int] = field(default_factory=lambda: [1])


# ── Offer status ────────────────────────────────────────────────────
def test_offer_dates_are_inclusive_on_both_ends():
    assert derive_offer_status(TODAY, TODAY, TODAY) is OfferStatus.ACTIVE
    assert derive_offer_status(date(2026, 3, 1), TODAY, TODAY) is OfferStatus.ACTIVE
    assert derive_offer_status(TODAY, date(2026, 3, 31), TODAY) is OfferStatus.ACTIVE


def test_future_start_is_scheduled():
    assert derive_offer_status(date(2026, 3, 16), date(2026, 4, 1), TODAY) is OfferStatus.SCHEDULED


def test_past_end_is_expired():
    assert derive_offer_status(date(2026, 3, 1), date(2026, 3, 14), TODAY) is OfferStatus.EXPIRED


def test_datetime_is_reduced_to_its_calendar_day():
    at = datetime(2026, 3, 15, 23, 59, tzinfo=timezone.utc)
    assert derive_offer_status(TODAY, TODAY, at) is OfferStatus.ACTIVE


def test_stored_expired_overrides_dates():
    offer = FakeOffer(1, 20, date(2026, 3, 1), date(2026, 3, 31), status="expired")
    assert effective_offer_status(offer, TODAY) is OfferStatus.EXPIRED
    assert not is_offer_applicable(offer, 1, TODAY)


def test_stale_stored_status_is_recomputed():
    offer = FakeOffer(1, 20, date(2026, 3, 1), date(2026, 3, 10), status="active")
    assert effective_offer_status(offer, TODAY) is OfferStatus.EXPIRED


# ── Best offer ──────────────────────────────────────────────────────
def test_offer_applies_only_to_its_products():
    offer = FakeOffer(1, 20, date(2026, 3, 1), date(2026, 3, 31), product_ids=[2, 3])
    assert not is_offer_applicable(offer, 1, TODAY)
    assert is_offer_applicable(offer, 2, TODAY)


def test_best_offer_is_highest_discount():
    offers = [
        FakeOffer(1, 10, date(2026, 3, 1), date(2026, 3, 31)),
        FakeOffer(2, 25, date(2026, 3, 1), date(2026, 3, 31)),
        FakeOffer(3, 40, date(2026, 3, 20), date(2026, 3, 31)),  # not started
    ]
    assert best_offer_for(offers, 1, TODAY).id == 2


def test_best_offer_tie_goes_to_lowest_id():
    offers = [
        FakeOffer(7, 30, date(2026, 3, 1), date(2026, 3, 31)),
        FakeOffer(4, 30, date(2026, 3, 1), date(2026, 3, 31)),
    ]
    assert best_offer_for(offers, 1, TODAY).id == 4


def test_no_applicable_offer():
    offers = [FakeOffer(1, 10, date(2026, 1, 1), date(2026, 1, 31))]
    assert best_offer_for(offers, 1, TODAY) is None
    assert best_offer_for([], 1, TODAY) is None


# ── Discounts ───────────────────────────────────────────────────────
def test_discount_rounds_half_up():
    assert discounted_amount(1000, 15) == 850
    assert discounted_amount(999, 15) == 849  # 849.15
    assert discounted_amount(101, 50) == 51  # 50.5
    assert discounted_amount(Decimal("1000.00"), 33) == 670


def test_full_discount_is_free():
    assert discounted_amount(450, 100) == 0


# ── Display ─────────────────────────────────────────────────────────
def test_english_display():
    assert format_price(1000, "EGP", None, "en") == "1,000 EGP"
    assert format_price(Decimal("12.50"), "usd", None, "en") == "12.50 USD"


def test_arabic_display_uses_arabic_digits_and_labels():
    assert format_price(1000, "EGP", None, "ar") == "١٬٠٠٠ ج.م"


def test_unit_is_appended_per_language():
    unit = {"ar": "متر", "en": "m²"}
    display = price_display(Decimal("250.00"), "EGP", unit)
    assert display["en"] == "250 EGP / m²"
    assert display["ar"] == "٢٥٠ ج.م / متر"


def test_missing_amount_is_price_on_request():
    assert price_display(None, "EGP", None) == {
        "ar": "السعر عند الطلب",
        "en": "Price on request",
    }


def test_unknown_currency_falls_back_to_code():
    assert format_price(5, "JOD", None, "ar") == "٥ JOD"
