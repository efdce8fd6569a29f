from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from resort_pricing.models import (
    Activity,
    AnnualBaseRate,
    MealPlan,
    RateOverride,
    RateRestriction,
    SeasonAssignment,
    SeasonRange,
    SeasonalRate,
)
from resort_pricing.services.bulk_service import (
    bulk_apply_overrides,
    bulk_apply_restrictions,
    bulk_upsert_activities,
    bulk_upsert_base_rates,
    bulk_upsert_meal_plans,
    bulk_upsert_seasonal_rates,
    seasonal_updates_from_table,
    set_season_range,
)

pytestmark = pytest.mark.django_db


def test_bulk_upsert_base_rates_is_idempotent(repository, sea_view, garden):
    updates = [
        {'room_type_id': sea_view.id, 'year': 2025, 'cost': '100', 'price': '200'},
        {'room_type_id': garden.id, 'year': 2025, 'cost': 80, 'price': 150},
    ]

    first = bulk_upsert_base_rates(repository, updates)
    second = bulk_upsert_base_rates(repository, updates)

    assert (first.success_count, first.error_count) == (2, 0)
    assert (second.success_count, second.error_count) == (2, 0)
    assert AnnualBaseRate.objects.count() == 2
    assert AnnualBaseRate.objects.get(room_type=garden).price_base_per_night == Decimal('150')


def test_bulk_upsert_seasonal_rates_collects_row_errors(repository, sea_view):
    updates = [
        {'room_type_id': sea_view.id, 'season': 'high', 'year': 2025,
         'cost_per_night': '150', 'price_per_night': '460'},
        {'room_type_id': sea_view.id, 'season': 'peak', 'year': 2025,
         'cost_per_night': '1', 'price_per_night': '1'},
    ]

    result = bulk_upsert_seasonal_rates(repository, updates)
    bulk_upsert_seasonal_rates(repository, updates)

    assert (result.success_count, result.error_count) == (1, 1)
    assert result.errors[0]['item'] == updates[1]
    assert "Unknown season" in result.errors[0]['message']
    assert SeasonalRate.objects.count() == 1


def test_seasonal_updates_from_table(sea_view):
    table = [{
        'room_type_id': sea_view.id,
        'room_type_name': 'Sea View',
        'low': {'cost_per_night': 1, 'price_per_night': 2},
        'mid': {'cost_per_night': 3, 'price_per_night': 4},
        'high': {'cost_per_night': 5, 'price_per_night': 6},
    }]

    updates = seasonal_updates_from_table(table, 2025)

    assert [(u['season'], u['price_per_night']) for u in updates] == [('low', 2), ('mid', 4), ('high', 6)]
    assert {u['year'] for u in updates} == {2025}


def test_bulk_upsert_meal_plans_and_activities(repository, resort):
    plans = [{'code': 'BO', 'name': 'Breakfast', 'cost_adult': 10, 'price_adult': '20', 'is_active': True}]
    assert bulk_upsert_meal_plans(repository, plans).success_count == 1
    assert bulk_upsert_meal_plans(repository, plans).success_count == 1
    breakfast = MealPlan.objects.get(resort=resort, code='BO')
    assert breakfast.price_adult == Decimal('20')
    assert breakfast.cost_child == Decimal('0')

    activities = [{'code': '3I', 'name': 'Three Islands', 'cost_trip_vendor': Decimal('300'),
                   'default_cost_source': 'vendor'}]
    result = bulk_upsert_activities(repository, activities)
    assert result.success_count == 1
    assert Activity.objects.get(resort=resort, code='3I').get_trip_cost() == Decimal('300')


def test_bulk_apply_overrides_over_rooms_and_dates(repository, sea_view, garden):
    dates = [date(2025, 12, 24), '2025-12-25']

    first = bulk_apply_overrides(
        repository, [sea_view.id, garden.id], dates, RateOverride.DELTA_PERCENT, Decimal('20'),
        note='Christmas', created_by='revenue@resort'
    )
    second = bulk_apply_overrides(
        repository, [sea_view.id, garden.id], dates, RateOverride.DELTA_PERCENT, Decimal('25')
    )

    assert first.as_dict() == {'success_count': 4, 'error_count': 0, 'errors': []}
    assert second.success_count == 4
    assert RateOverride.objects.count() == 4
    override = RateOverride.objects.get(room_type=garden, date=date(2025, 12, 25))
    assert override.value == Decimal('25')
    assert override.created_by == 'revenue@resort'


def test_bulk_apply_overrides_rejects_unknown_type(repository, sea_view):
    result = bulk_apply_overrides(repository, [sea_view.id], [date(2025, 1, 1)], 'double', 2)

    assert result.error_count == 1
    assert result.errors[0]['item'] == (sea_view.id, date(2025, 1, 1))
    assert not RateOverride.objects.exists()


def test_bulk_apply_restrictions(repository, sea_view):
    dates = [date(2025, 12, 30), date(2025, 12, 31)]

    result = bulk_apply_restrictions(repository, [sea_view.id], dates, {'min_los': 3, 'close_to_arrival': True})
    bulk_apply_restrictions(repository, [sea_view.id], dates, {'min_los': 2})

    assert result.success_count == 2
    restriction = RateRestriction.objects.get(room_type=sea_view, date=date(2025, 12, 31))
    assert restriction.min_los == 2
    assert restriction.close_to_arrival is True

    invalid = bulk_apply_restrictions(repository, [sea_view.id], dates, {'min_los': 5, 'max_los': 2})
    assert invalid.error_count == 2

    unknown = bulk_apply_restrictions(repository, [sea_view.id], dates, {'stop_sell': True})
    assert unknown.error_count == 2


def test_set_season_range(repository, resort):
    SeasonAssignment.objects.create(resort=resort, date=date(2025, 7, 2), season='low')

    season_range, result = set_season_range(repository, '2025-07-01', '2025-07-03', 'high', 'School holidays')

    assert SeasonRange.objects.get(pk=season_range.pk).description == 'School holidays'
    assert result.success_count == 3
    assert list(
        SeasonAssignment.objects.filter(resort=resort).order_by('date').values_list('season', flat=True)
    ) == ['high', 'high', 'high']


def test_set_season_range_rejects_reversed_dates(repository):
    with pytest.raises(ValidationError):
        set_season_range(repository, '2025-07-03', '2025-07-01', 'high')
    assert not SeasonRange.objects.exists()


@pytest.mark.parametrize('cost', ['abc', None, '', 'NaN'])
def test_bulk_upsert_base_rates_rejects_bad_numbers(repository, sea_view, garden, cost):
    updates = [
        {'room_type_id': sea_view.id, 'year': 2025, 'cost': cost, 'price': '200'},
        {'room_type_id': garden.id, 'year': 2025, 'cost': '80', 'price': '150'},
    ]

    result = bulk_upsert_base_rates(repository, updates)

    assert (result.success_count, result.error_count) == (1, 1)
    assert result.errors[0]['item'] == updates[0]
    assert not AnnualBaseRate.objects.filter(room_type=sea_view).exists()
    assert AnnualBaseRate.objects.get(room_type=garden).price_base_per_night == Decimal('150')


def test_bad_number_leaves_stored_rate_untouched(repository, sea_view, sea_view_2025):
    result = bulk_upsert_base_rates(
        repository, [{'room_type_id': sea_view.id, 'year': 2025, 'cost': '100', 'price': 'n/a'}]
    )

    assert result.error_count == 1
    sea_view_2025.refresh_from_db()
    assert sea_view_2025.price_base_per_night == Decimal('200')


def test_bulk_upsert_seasonal_rates_rejects_missing_price(repository, sea_view):
    result = bulk_upsert_seasonal_rates(
        repository, [{'room_type_id': sea_view.id, 'season': 'low', 'year': 2025, 'cost_per_night': '90'}]
    )

    assert result.error_count == 1
    assert not SeasonalRate.objects.exists()


def test_bulk_upsert_meal_plans_rejects_bad_numbers(repository, resort):
    plans = [
        {'code': 'LO', 'name': 'Lunch', 'cost_adult': 'twelve', 'price_adult': '30'},
        {'code': 'DO', 'name': 'Dinner', 'cost_adult': '15', 'price_adult': '40'},
    ]

    result = bulk_upsert_meal_plans(repository, plans)

    assert (result.success_count, result.error_count) == (1, 1)
    assert list(MealPlan.objects.filter(resort=resort).values_list('code', flat=True)) == ['DO']


def test_bulk_upsert_activities_rejects_bad_numbers(repository, resort):
    result = bulk_upsert_activities(repository, [{'code': '3I', 'price_adult': 'free'}])

    assert result.error_count == 1
    assert not Activity.objects.filter(resort=resort).exists()


def test_bulk_apply_overrides_bad_date_fails_only_its_cell(repository, sea_view):
    result = bulk_apply_overrides(repository, [sea_view.id], ['2025-01-01', 'not-a-date'], 'set', 100)

    assert (result.success_count, result.error_count) == (1, 1)
    assert result.errors[0]['item'] == (sea_view.id, 'not-a-date')
    assert list(RateOverride.objects.values_list('date', flat=True)) == [date(2025, 1, 1)]


def test_bulk_apply_restrictions_bad_date_fails_only_its_cell(repository, sea_view, garden):
    result = bulk_apply_restrictions(
        repository, [sea_view.id, garden.id], ['someday', date(2025, 1, 2)], {'is_closed': True}
    )

    assert (result.success_count, result.error_count) == (2, 2)
    assert RateRestriction.objects.filter(date=date(2025, 1, 2), is_closed=True).count() == 2
