"""
Structured prices, offer applicability and discount computation.

Prices are stored as ``amount + currency + unit`` and rendered per locale
on the way out. Offer dates are calendar days and both ends are inclusive.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

_ARABIC_DIGITS = str.maketrans("0123456789.", "٠١٢٣٤٥٦٧٨٩٫")

# Currency labels per locale; unknown codes fall back to the ISO code.
_CURRENCY_LABELS: dict[str, dict[str, str]] = {
    "EGP": {"en": "EGP", "ar": "ج.م"},
    "USD": {"en": "USD", "ar": "دولار"},
    "EUR": {"en": "EUR", "ar": "يورو"},
    "SAR": {"en": "SAR", "ar": "ر.س"},
}

_ON_REQUEST = {"en": "Price on request", "ar": "السعر عند الطلب"}


class OfferStatus(str, enum.Enum):
    ACTIVE = "active"
    SCHEDULED = "scheduled"
    EXPIRED = "expired"


class OfferLike(Protocol):
    id: int
    status: str
    start_date: date
    end_date: date
    discount_percentage: int

    @property
    def product_ids(self) -> list[int]: ...


def _as_date(at: date | datetime) -> date:
    return at.date() if isinstance(at, datetime) else at


# ── Offers ──────────────────────────────────────────────────────────
def derive_offer_status(start: date, end: date, at: date | datetime) -> OfferStatus:
    """Status implied by the date range alone."""
    today = _as_date(at)
    if today > end:
        return OfferStatus.EXPIRED
    if today < start:
        return OfferStatus.SCHEDULED
    return OfferStatus.ACTIVE


def effective_offer_status(offer: OfferLike, at: date | datetime) -> OfferStatus:
    """Stored ``expired`` ends an offer early; otherwise the dates decide."""
    if offer.status == OfferStatus.EXPIRED.value:
        return OfferStatus.EXPIRED
    return derive_offer_status(offer.start_date, offer.end_date, at)


def is_offer_applicable(offer: OfferLike, product_id: int, at: date | datetime) -> bool:
    return (
        product_id in offer.product_ids
        and effective_offer_status(offer, at) is OfferStatus.ACTIVE
    )


def best_offer_for(
    offers: Iterable[OfferLike], product_id: int, at: date | datetime
) -> OfferLike | None:
    """Highest-discount applicable offer; ties go to the oldest offer."""
    applicable = [o for o in offers if is_offer_applicable(o, product_id, at)]
    if not applicable:
        return None
    return min(applicable, key=lambda o: (-o.discount_percentage, o.id))


def discounted_amount(amount: Decimal | int | float, discount_percentage: int) -> int:
    """Apply a percentage discount and round half-up to a whole amount."""
    value = Decimal(str(amount)) * (Decimal(100) - Decimal(discount_percentage)) / Decimal(100)
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


# ── Display ─────────────────────────────────────────────────────────
def _format_number(amount: Decimal | int, lang: str) -> str:
    value = Decimal(str(amount))
    if value == value.to_integral_value():
        text = f"{int(value):,}"
    else:
        text = f"{value:,.2f}"
    if lang == "ar":
        return text.replace(",", "٬").translate(_ARABIC_DIGITS)
    return text


def format_price(
    amount: Decimal | int | None,
    currency: str,
    unit: dict[str, str | None] | None,
    lang: str,
) -> str:
    if amount is None:
        return _ON_REQUEST[lang]
    label = _CURRENCY_LABELS.get(currency.upper(), {}).get(lang, currency.upper())
    text = f"{_format_number(amount, lang)} {label}"
    unit_text = (unit or {}).get(lang)
    if unit_text:
        text = f"{text} / {unit_text}"
    return text


def price_display(
    amount: Decimal | int | None,
    currency: str,
    unit: dict[str, str | None] | None,
) -> dict[str, str]:
    return {lang: format_price(amount, currency, unit, lang) for lang in ("ar", "en")}
