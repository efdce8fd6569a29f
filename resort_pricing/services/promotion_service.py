"""
Promotion & Surcharge Service
=============================

Adjusts a resolved stay price at booking time.

For each stay night, in date order:
1. Matching promotions apply one after another, each on the running price:
       discount = running × percent_off / 100; running -= discount
   so two promotions of 10% and 20% give ×0.9 × 0.8, and discounts keep
   compounding across nights.
2. Matching surcharges add amount_per_pax × (adults + children) each.
After the last night: optional round to nearest 5, then floor at 0 and
round to a whole amount.
"""

import logging
import math
from datetime import datetime, time

from django.utils import timezone

from resort_pricing.models import SEASON_MID, TARGET_SEASON_ANY
from .money import ZERO, HUNDRED, to_decimal, round_rm5, round_whole
from .rate_service import as_date, weekday_number, stay_dates as nights_between, RateResolver

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


# =============================================================================
# ELIGIBILITY
# =============================================================================

def days_in_advance(stay_date, created_at=None):
    """
    Whole days between booking creation and the stay night (midnight),
    rounded up. A missing created_at means the booking is made now.
    """
    created_at = created_at or timezone.now()
    if not isinstance(created_at, datetime):
        created_at = datetime.combine(created_at, time.min)

    stay_start = datetime.combine(as_date(stay_date), time.min)
    if timezone.is_aware(created_at):
        stay_start = timezone.make_aware(stay_start, created_at.tzinfo)

    seconds = (stay_start - created_at).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def _covers(adjustment, stay_date):
    return as_date(adjustment.date_start) <= stay_date <= as_date(adjustment.date_end)


def _common_filters_pass(adjustment, stay_date, season, room_type_id, package_code):
    if not getattr(adjustment, 'is_active', True):
        return False
    if not _covers(adjustment, stay_date):
        return False

    target_season = adjustment.target_season or TARGET_SEASON_ANY
    if target_season != TARGET_SEASON_ANY and target_season != season:
        return False

    if adjustment.room_type_id and adjustment.room_type_id != room_type_id:
        return False

    if adjustment.package_code and adjustment.package_code != package_code:
        return False

    if adjustment.weekday_mask and str(weekday_number(stay_date)) not in adjustment.weekday_mask:
        return False

    return True


def promotion_matches(promotion, stay_date, season, room_type_id=None, package_code=None,
                      created_at=None):
    """True when the promotion applies to this stay night."""
    stay_date = as_date(stay_date)
    if not _common_filters_pass(promotion, stay_date, season, room_type_id, package_code):
        return False

    min_days = promotion.min_days_in_advance or 0
    if min_days > 0 and days_in_advance(stay_date, created_at) < min_days:
        return False

    return True


def surcharge_matches(surcharge, stay_date, season, room_type_id=None, package_code=None):
    """True when the surcharge applies to this stay night (no advance-booking rule)."""
    return _common_filters_pass(surcharge, as_date(stay_date), season, room_type_id, package_code)


# =============================================================================
# APPLICATION
# =============================================================================

def apply_promotions_and_surcharges(base_price, stay_dates, booking_created_at=None,
                                    room_type_id=None, package_code=None,
                                    pax_adult=0, pax_child=0, round_to_rm5=False,
                                    season_by_date=None, promotions=(), surcharges=()):
    """
    Apply promotions and surcharges across a stay.

    Args:
        base_price: price before adjustments
        stay_dates: the stay nights, in order (dates or ISO strings)
        booking_created_at: datetime the booking was made (None = now)
        room_type_id / package_code: booking being priced
        pax_adult / pax_child: guest counts; surcharges charge both
        round_to_rm5: round the final price to the nearest 5
        season_by_date: {date: season}; missing dates are mid season
        promotions / surcharges: candidate records, applied in the given order

    Returns:
        dict with final_price, applied_promotions, applied_surcharges
    """
    season_by_date = season_by_date or {}
    price = to_decimal(base_price)
    total_pax = (pax_adult or 0) + (pax_child or 0)
    applied_promotions = []
    applied_surcharges = []

    for raw_date in stay_dates:
        stay_date = as_date(raw_date)
        season = season_by_date.get(stay_date) or season_by_date.get(str(raw_date)) or SEASON_MID

        for promotion in promotions:
            if not promotion_matches(promotion, stay_date, season, room_type_id,
                                     package_code, booking_created_at):
                continue
            percent = to_decimal(promotion.percent_off)
            discount = price * percent / HUNDRED
            price -= discount
            applied_promotions.append({
                'name': promotion.name,
                'percent': percent,
                'discount': discount,
                'date': stay_date,
            })

        for surcharge in surcharges:
            if not surcharge_matches(surcharge, stay_date, season, room_type_id, package_code):
                continue
            amount_per_pax = to_decimal(surcharge.amount_per_pax)
            amount = amount_per_pax * total_pax
            price += amount
            applied_surcharges.append({
                'name': surcharge.name,
                'amount_per_pax': amount_per_pax,
                'total_amount': amount,
                'date': stay_date,
            })

    if round_to_rm5:
        price = round_rm5(price)

    return {
        'final_price': max(ZERO, round_whole(price)),
        'applied_promotions': applied_promotions,
        'applied_surcharges': applied_surcharges,
    }


class PromotionService:
    """
    Loads promotions, surcharges and seasons for a stay and applies them.

    Usage:
        service = PromotionService(PricingRepository(resort))
        result = service.apply(
            base_price=Decimal('1200'),
            check_in=date(2025, 6, 1),
            check_out=date(2025, 6, 4),
            booking_created_at=booking.created_at,
            room_type_id=room.id,
            package_code='RB',
            pax_adult=2,
            pax_child=1,
        )
    """

    def __init__(self, repository):
        self.repository = repository

    def apply(self, base_price, check_in, check_out, booking_created_at=None,
              room_type_id=None, package_code=None, pax_adult=0, pax_child=0,
              round_to_rm5=None):
        nights = nights_between(check_in, check_out)
        if not nights:
            return apply_promotions_and_surcharges(base_price, [])

        if round_to_rm5 is None:
            season_settings = self.repository.fetch_season_settings()
            round_to_rm5 = bool(season_settings and season_settings.round_to_rm5)

        first, last = nights[0], nights[-1]
        promotions = self.repository.fetch_active_promotions(first, last)
        surcharges = self.repository.fetch_active_surcharges(first, last)
        season_by_date = RateResolver(self.repository).season_map(nights)

        logger.debug(
            "Applying %d promotion(s) and %d surcharge(s) to %d night(s)",
            len(promotions), len(surcharges), len(nights)
        )

        return apply_promotions_and_surcharges(
            base_price=base_price,
            stay_dates=nights,
            booking_created_at=booking_created_at,
            room_type_id=room_type_id,
            package_code=package_code,
            pax_adult=pax_adult,
            pax_child=pax_child,
            round_to_rm5=round_to_rm5,
            season_by_date=season_by_date,
            promotions=promotions,
            surcharges=surcharges,
        )


# =============================================================================
# DISPLAY HELPERS
# =============================================================================

WEEKDAY_LABELS = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']


def weekday_label(mask):
    """'135' -> 'Mon, Wed, Fri'; blank mask -> 'All days'."""
    if not mask:
        return 'All days'
    selected = [
        WEEKDAY_LABELS[int(day) - 1]
        for day in str(mask)
        if day.isdigit() and 1 <= int(day) <= 7
    ]
    return ', '.join(selected) or 'All days'


def format_date_range(start, end):
    """'Jun 1 - Jun 30, 2025'."""
    start, end = as_date(start), as_date(end)
    return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"
