from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from resort_pricing.models import (
    PackageConfig,
    Promotion,
    RateOverride,
    Resort,
    SeasonRange,
    Surcharge,
    Tax,
)

pytestmark = pytest.mark.django_db


def test_new_resort_gets_pricing_defaults(resort):
    settings = resort.season_settings
    assert (settings.mult_low, settings.mult_mid, settings.mult_high) == (
        Decimal('-10'), Decimal('0'), Decimal('15'),
    )
    assert settings.round_to_rm5 is False
    assert resort.pricing_config.boat_cost_return_trip == Decimal('0')

    configs = PackageConfig.objects.filter(resort=resort).order_by('sort_order')
    assert [c.package_code for c in configs] == ['RB', 'RBB', 'RB3I', 'FB', 'FB3I']
    fb = configs.get(package_code='FB')
    assert (fb.includes_lunch, fb.includes_dinner, fb.includes_activities_3i) == (True, True, False)


def test_saving_resort_again_does_not_duplicate_defaults(resort):
    resort.name = 'Renamed'
    resort.save()
    assert PackageConfig.objects.filter(resort=resort).count() == 5
    assert Resort.objects.count() == 1


def test_override_rejects_unknown_type(resort, sea_view):
    override = RateOverride(
        resort=resort,
        room_type=sea_view,
        date=date(2025, 1, 1),
        override_type='multiply',
        value=Decimal('2'),
    )
    with pytest.raises(ValidationError) as excinfo:
        override.full_clean()
    assert 'override_type' in excinfo.value.message_dict


def test_override_adjustment_display(resort, sea_view):
    assert RateOverride(override_type=RateOverride.SET, value=Decimal('350')).get_adjustment_display() == '= 350'
    assert RateOverride(
        override_type=RateOverride.DELTA_PERCENT, value=Decimal('15')
    ).get_adjustment_display() == '+15%'


def test_season_range_dates(resort):
    season_range = SeasonRange(
        resort=resort,
        date_start=date(2025, 2, 27),
        date_end=date(2025, 3, 1),
        season='high',
    )
    assert list(season_range.get_all_dates()) == [date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1)]

    season_range.date_end = date(2025, 2, 1)
    with pytest.raises(ValidationError):
        season_range.full_clean()


def test_promotion_scope_validation(resort):
    promotion = Promotion(
        resort=resort,
        name='Honeymoon',
        date_start=date(2025, 6, 1),
        date_end=date(2025, 6, 30),
        percent_off=Decimal('15'),
        applies_to=Promotion.APPLIES_PACKAGE,
    )
    with pytest.raises(ValidationError) as excinfo:
        promotion.full_clean()
    assert 'package_code' in excinfo.value.message_dict

    promotion.package_code = 'FB'
    promotion.weekday_mask = '58'
    with pytest.raises(ValidationError) as excinfo:
        promotion.full_clean()
    assert 'weekday_mask' in excinfo.value.message_dict


def test_surcharge_and_tax_defaults(resort):
    surcharge = Surcharge.objects.create(
        resort=resort,
        name='Chinese New Year',
        date_start=date(2025, 1, 28),
        date_end=date(2025, 2, 2),
        amount_per_pax=Decimal('30'),
    )
    tax = Tax.objects.create(resort=resort, name='SST', rate=Decimal('6'))

    assert surcharge.target_season == 'any'
    assert surcharge.weekday_mask == ''
    assert (tax.application_type, tax.is_percentage) == (Tax.PER_TOTAL, True)
    assert (tax.apply_to_adults, tax.apply_to_children) == (True, False)
