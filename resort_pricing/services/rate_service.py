"""
Rate Resolution Service
=======================

Resolves the nightly cost/price of a room type on a date.

Calculation Flow:
1. Annual base rate for the date's year (else the latest earlier year, else 0)
2. Season for the date (no assignment = mid)
3. Season price = base price × (1 + season multiplier / 100)
   Cost is not season-adjusted.
4. Date override for the exact date:
   set → value, delta_amount → season price + value,
   delta_percent → season price × (1 + value / 100)
5. Price floored at 0

Missing records are never errors: every lookup falls back to a default so
calendars and quotes keep rendering against partial data.
"""

import logging
from datetime import date, datetime

from dateutil.parser import isoparse
from dateutil.rrule import rrule, DAILY

from resort_pricing.conf import get_setting
from resort_pricing.models import SEASON_MID, SEASONS, RateOverride
from .money import ZERO, ONE, HUNDRED, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_RESTRICTION = {
    'is_closed': False,
    'close_to_arrival': False,
    'close_to_departure': False,
    'min_los': None,
    'max_los': None,
    'min_advance_days': None,
    'max_advance_days': None,
    'notes': None,
}


# =============================================================================
# DATE HELPERS
# =============================================================================

def as_date(value):
    """Accept a date, datetime or ISO string ('2025-03-01')."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


def generate_date_range(start_date, days):
    """List of `days` consecutive dates starting at start_date."""
    if days <= 0:
        return []
    start = as_date(start_date)
    return [dt.date() for dt in rrule(DAILY, dtstart=start, count=days)]


def date_span(start_date, end_date):
    """Every date from start_date to end_date inclusive."""
    start, end = as_date(start_date), as_date(end_date)
    if end < start:
        return []
    return [dt.date() for dt in rrule(DAILY, dtstart=start, until=end)]


def stay_dates(check_in, check_out):
    """The nights of a stay: check-in up to, not including, check-out."""
    nights = (as_date(check_out) - as_date(check_in)).days
    return generate_date_range(check_in, nights)


def weekday_number(value):
    """ISO weekday: Monday=1 .. Sunday=7."""
    return as_date(value).isoweekday()


def filter_dates_by_weekdays(dates, weekday_mask):
    """
    Keep the dates whose ISO weekday is in weekday_mask.

    The mask may be a digit string ('67') or an iterable of ints; an empty
    mask keeps every date.
    """
    if not weekday_mask:
        return list(dates)
    allowed = {int(day) for day in weekday_mask}
    return [d for d in dates if weekday_number(d) in allowed]


# =============================================================================
# PURE CALCULATIONS
# =============================================================================

def season_multipliers(season_settings=None):
    """
    Percentage change per season from a SeasonSettings row.

    A missing row, or a missing value on it, uses the configured default
    (-10 / 0 / +15 unless overridden in settings.RESORT_PRICING).
    """
    defaults = get_setting('DEFAULT_SEASON_MULTIPLIERS')
    multipliers = {}
    for season in SEASONS:
        stored = getattr(season_settings, f'mult_{season}', None) if season_settings else None
        multipliers[season] = to_decimal(stored, default=to_decimal(defaults[season]))
    return multipliers


def apply_season(base_price, season, multipliers):
    percent = multipliers.get(season, multipliers.get(SEASON_MID, ZERO))
    return to_decimal(base_price) * (ONE + percent / HUNDRED)


def apply_override(season_price, override):
    """
    Apply a RateOverride (or any object with override_type/value) to a
    season price. Returns (price, override_applied).
    """
    if override is None:
        return season_price, False

    value = to_decimal(override.value)
    override_type = override.override_type

    if override_type == RateOverride.SET:
        return value, True
    if override_type == RateOverride.DELTA_AMOUNT:
        return season_price + value, True
    if override_type == RateOverride.DELTA_PERCENT:
        return season_price * (ONE + value / HUNDRED), True

    logger.warning("Ignoring override with unknown type %r", override_type)
    return season_price, True


def resolve_nightly_rate(base_price, base_cost, season, multipliers, override=None):
    """
    Resolve one night from already-fetched data.

    Returns:
        dict with price, cost, season, base, season_price,
        override_applied, override
    """
    base_price = to_decimal(base_price)
    season = season or SEASON_MID
    season_price = apply_season(base_price, season, multipliers)
    final_price, override_applied = apply_override(season_price, override)

    return {
        'price': max(ZERO, final_price),
        'cost': to_decimal(base_cost),
        'season': season,
        'base': base_price,
        'season_price': season_price,
        'override_applied': override_applied,
        'override': override,
    }


# =============================================================================
# RESOLVER
# =============================================================================

class RateResolver:
    """
    Nightly rate lookups against a PricingRepository.

    Usage:
        from resort_pricing.repository import PricingRepository
        from resort_pricing.services import RateResolver

        resolver = RateResolver(PricingRepository(resort))
        night = resolver.resolve(room.id, date(2025, 12, 24))
        print(night['price'], night['season'], night['override_applied'])
    """

    def __init__(self, repository):
        self.repository = repository

    def get_base_rate(self, room_type_id, year):
        """
        (cost, price) for the year, else the latest earlier year, else zeros.
        """
        rate = self.repository.fetch_annual_base_rate(room_type_id, year)
        if rate is None:
            rate = self.repository.fetch_latest_annual_base_rate(room_type_id, before_year=year)
        if rate is None:
            return ZERO, ZERO
        return to_decimal(rate.cost_base_per_night), to_decimal(rate.price_base_per_night)

    def get_season(self, stay_date):
        assignment = self.repository.fetch_season_assignment(as_date(stay_date))
        return assignment.season if assignment else SEASON_MID

    def get_multipliers(self):
        return season_multipliers(self.repository.fetch_season_settings())

    def get_restriction(self, room_type_id, stay_date):
        restriction = self.repository.fetch_restriction(room_type_id, as_date(stay_date))
        if restriction is None:
            return dict(DEFAULT_RESTRICTION)
        return restriction.as_dict()

    def resolve(self, room_type_id, stay_date):
        stay_date = as_date(stay_date)
        cost, price = self.get_base_rate(room_type_id, stay_date.year)
        override = self.repository.fetch_override(room_type_id, stay_date)
        return resolve_nightly_rate(
            base_price=price,
            base_cost=cost,
            season=self.get_season(stay_date),
            multipliers=self.get_multipliers(),
            override=override,
        )

    def resolve_range(self, room_type_ids, start_date, end_date):
        """
        Resolve every night in [start_date, end_date] for each room type.

        Season assignments, overrides and restrictions for the window are
        fetched once up front.

        Returns:
            list of {'room_type_id': id, 'rates': [night dicts + 'date' and
            'restriction']}, in room_type_ids order
        """
        dates = date_span(start_date, end_date)
        if not dates:
            return [{'room_type_id': room_type_id, 'rates': []} for room_type_id in room_type_ids]

        first, last = dates[0], dates[-1]
        multipliers = self.get_multipliers()

        season_by_date = {
            assignment.date: assignment.season
            for assignment in self.repository.fetch_season_assignments(first, last)
        }
        overrides = {
            (override.room_type_id, override.date): override
            for override in self.repository.fetch_overrides(room_type_ids, first, last)
        }
        restrictions = {
            (restriction.room_type_id, restriction.date): restriction
            for restriction in self.repository.fetch_restrictions(room_type_ids, first, last)
        }

        results = []
        for room_type_id in room_type_ids:
            base_rates = {}
            nights = []
            for stay_date in dates:
                if stay_date.year not in base_rates:
                    base_rates[stay_date.year] = self.get_base_rate(room_type_id, stay_date.year)
                cost, price = base_rates[stay_date.year]

                night = resolve_nightly_rate(
                    base_price=price,
                    base_cost=cost,
                    season=season_by_date.get(stay_date, SEASON_MID),
                    multipliers=multipliers,
                    override=overrides.get((room_type_id, stay_date)),
                )
                restriction = restrictions.get((room_type_id, stay_date))
                night['date'] = stay_date
                night['restriction'] = restriction.as_dict() if restriction else dict(DEFAULT_RESTRICTION)
                nights.append(night)

            results.append({'room_type_id': room_type_id, 'rates': nights})

        return results

    def season_map(self, dates):
        """{date: season} for the given dates, defaulting to mid."""
        dates = [as_date(d) for d in dates]
        if not dates:
            return {}
        assigned = {
            assignment.date: assignment.season
            for assignment in self.repository.fetch_season_assignments(min(dates), max(dates))
        }
        return {d: assigned.get(d, SEASON_MID) for d in dates}
