"""
Bulk Write Service
==================

Applies many rate edits one row at a time through a PricingRepository.

There is no batch transaction. Each row runs in its own savepoint; a failing
row is recorded in the BulkResult and the loop moves on.
Every write is an upsert on the row's natural key, so re-running a batch
updates the same records instead of duplicating them.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from resort_pricing.models import SEASONS
from .money import strict_decimal
from .rate_service import as_date

logger = logging.getLogger(__name__)

ROW_ERRORS = (DatabaseError, ValidationError, ValueError, TypeError)

MEAL_PLAN_FIELDS = ('cost_adult', 'cost_child', 'price_adult', 'price_child')
ACTIVITY_MONEY_FIELDS = (
    'cost_trip_resort', 'cost_trip_vendor', 'cost_adult', 'cost_child',
    'price_adult', 'price_child',
)
ACTIVITY_FIELDS = ('name', 'default_cost_source', 'is_active')


class BulkResult:
    """Outcome of a bulk write: counts plus one error entry per failed row."""

    def __init__(self):
        self.success_count = 0
        self.error_count = 0
        self.errors = []

    def __repr__(self):
        return f"<BulkResult success={self.success_count} errors={self.error_count}>"

    def add_success(self):
        self.success_count += 1

    def add_error(self, item, exc):
        self.error_count += 1
        self.errors.append({'item': item, 'message': str(exc)})
        logger.warning("Bulk write failed for %r: %s", item, exc)

    def as_dict(self):
        return {
            'success_count': self.success_count,
            'error_count': self.error_count,
            'errors': self.errors,
        }


def _run(items, write):
    result = BulkResult()
    for item in items:
        try:
            with transaction.atomic():
                write(item)
        except ROW_ERRORS as e:
            result.add_error(item, e)
        else:
            result.add_success()
    return result


# =============================================================================
# RATES
# =============================================================================

def bulk_upsert_base_rates(repository, updates):
    """updates: [{'room_type_id', 'year', 'cost', 'price'}]"""
    def write(update):
        repository.upsert_annual_base_rate(
            room_type_id=update['room_type_id'],
            year=update['year'],
            cost=strict_decimal(update.get('cost')),
            price=strict_decimal(update.get('price')),
        )
    return _run(updates, write)


def bulk_upsert_seasonal_rates(repository, updates):
    """updates: [{'room_type_id', 'season', 'year', 'cost_per_night', 'price_per_night'}]"""
    def write(update):
        if update['season'] not in SEASONS:
            raise ValueError(f"Unknown season {update['season']!r}")
        repository.upsert_seasonal_rate(
            room_type_id=update['room_type_id'],
            season=update['season'],
            year=update['year'],
            cost_per_night=strict_decimal(update.get('cost_per_night')),
            price_per_night=strict_decimal(update.get('price_per_night')),
        )
    return _run(updates, write)


def seasonal_updates_from_table(rates, year):
    """
    Flatten editor rows ({'room_type_id', 'low': {...}, 'mid': ..., 'high': ...})
    into one seasonal-rate update per room and season.
    """
    return [
        {
            'room_type_id': rate['room_type_id'],
            'season': season,
            'year': rate.get('year', year),
            'cost_per_night': rate[season]['cost_per_night'],
            'price_per_night': rate[season]['price_per_night'],
        }
        for rate in rates
        for season in SEASONS
    ]


# =============================================================================
# MEALS & ACTIVITIES
# =============================================================================

def bulk_upsert_meal_plans(repository, plans):
    """
    plans: [{'code', 'name', 'cost_adult', ..., 'is_active'}]

    Money fields left out of a plan keep their stored (or default) value.
    """
    def write(plan):
        values = {field: strict_decimal(plan[field]) for field in MEAL_PLAN_FIELDS if field in plan}
        values['name'] = plan.get('name') or ''
        values['is_active'] = bool(plan.get('is_active'))
        repository.upsert_meal_plan(plan['code'], values)
    return _run(plans, write)


def bulk_upsert_activities(repository, activities):
    def write(activity):
        values = {field: activity[field] for field in ACTIVITY_FIELDS if field in activity}
        values.update(
            (field, strict_decimal(activity[field]))
            for field in ACTIVITY_MONEY_FIELDS if field in activity
        )
        repository.upsert_activity(activity['code'], values)
    return _run(activities, write)


# =============================================================================
# OVERRIDES, RESTRICTIONS, SEASONS
# =============================================================================

def bulk_apply_overrides(repository, room_type_ids, dates, override_type, value,
                         note='', created_by=''):
    """Set the same override on every room type × date."""
    cells = [(room_type_id, d) for room_type_id in room_type_ids for d in dates]

    def write(cell):
        room_type_id, stay_date = cell
        repository.upsert_override(
            room_type_id=room_type_id,
            stay_date=as_date(stay_date),
            override_type=override_type,
            value=value,
            note=note,
            created_by=created_by,
        )
    return _run(cells, write)


def bulk_apply_restrictions(repository, room_type_ids, dates, restrictions):
    """Set the same restriction flags on every room type × date."""
    cells = [(room_type_id, d) for room_type_id in room_type_ids for d in dates]

    def write(cell):
        room_type_id, stay_date = cell
        repository.upsert_restriction(room_type_id, as_date(stay_date), dict(restrictions))
    return _run(cells, write)


def set_season_range(repository, date_start, date_end, season, description=''):
    """
    Record a SeasonRange and assign `season` to every date in it.

    An invalid range (end before start, unknown season) raises
    ValidationError before anything is written.

    Returns:
        (SeasonRange, BulkResult for the per-date assignments)
    """
    season_range = repository.create_season_range(date_start, date_end, season, description)

    def write(stay_date):
        repository.upsert_season_assignment(stay_date, season, description)

    result = _run(season_range.get_all_dates(), write)
    logger.info(
        "Assigned %s season to %d date(s) from %s to %s",
        season, result.success_count, season_range.date_start, season_range.date_end
    )
    return season_range, result
