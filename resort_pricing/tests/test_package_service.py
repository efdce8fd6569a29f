from decimal import Decimal

import pytest

from resort_pricing.models import (
    AnnualBaseRate,
    MealPlan,
    PackageConfig,
    PricingConfig,
    RoomType,
    SeasonSettings,
    PACKAGE_NAMES,
)
from resort_pricing.services.package_service import (
    PackageCompositionEngine,
    addon_totals,
    build_packages_matrix,
    calc_booking_totals,
    calculate_composite,
    recalculate_composites,
)


def meal(code, cost_adult, price_adult, cost_child='0', price_child='0'):
    return MealPlan(
        code=code,
        cost_adult=Decimal(cost_adult),
        price_adult=Decimal(price_adult),
        cost_child=Decimal(cost_child),
        price_child=Decimal(price_child),
    )


def package_configs(*inactive):
    return [
        PackageConfig(package_code=code, package_name=name, is_active=code not in inactive)
        for code, name in PACKAGE_NAMES.items()
    ]


def make_engine(meals=None, round_to_rm5=False, pricing_config=None, configs=None,
                room_price='200', room_cost='100'):
    room = RoomType(id=1, name='Sea View')
    return PackageCompositionEngine(
        room_types=[room],
        base_rates=[AnnualBaseRate(
            room_type_id=1,
            year=2025,
            cost_base_per_night=Decimal(room_cost),
            price_base_per_night=Decimal(room_price),
        )],
        season_settings=SeasonSettings(
            mult_low=Decimal('-10'),
            mult_mid=Decimal('0'),
            mult_high=Decimal('15'),
            round_to_rm5=round_to_rm5,
        ),
        pricing_config=pricing_config or PricingConfig(
            boat_cost_return_trip=Decimal('50'),
            price_boat_adult=Decimal('30'),
            price_boat_child=Decimal('15'),
            activities_3i_cost_trip=Decimal('100'),
            cost_activities_3i=Decimal('25'),
            price_activities_3i=Decimal('62.50'),
        ),
        meal_plans=meals if meals is not None else [meal('BO', '10', '20')],
        package_configs=configs if configs is not None else package_configs(),
    )


def find_row(rows, code, season='mid', pax=2):
    for row in rows:
        if row['package_code'] == code and row['season'] == season and row['pax'] == pax:
            return row
    raise AssertionError(f"No {code}/{season}/{pax} row")


class TestPackageMatrix:

    def test_room_and_breakfast(self):
        rows = make_engine().build_matrix(pax_options=[2], nights=1)
        rb = find_row(rows, 'RB')

        assert rb['package_name'] == 'Room & Breakfast'
        assert rb['room_type'] == 'Sea View'
        assert rb['breakdown']['room_price_per_adult'] == Decimal('100')
        assert rb['breakdown']['breakfast_price_per_adult'] == Decimal('20')
        assert rb['price_per_adult'] == Decimal('150')
        assert rb['breakdown']['total_price'] == Decimal('300')
        assert rb['cost'] == Decimal('170')
        assert rb['profit_per_adult'] == Decimal('65')

    def test_rbb_duplicates_rb(self):
        rows = make_engine().build_matrix(pax_options=[2])
        rb, rbb = find_row(rows, 'RB'), find_row(rows, 'RBB')
        assert (rbb['price_per_adult'], rbb['cost'], rbb['profit_per_adult']) == (
            rb['price_per_adult'], rb['cost'], rb['profit_per_adult'],
        )

    def test_season_multipliers_apply_to_room_price_only(self):
        rows = make_engine().build_matrix(pax_options=[2])
        assert find_row(rows, 'RB', 'low')['price_per_adult'] == Decimal('140')
        assert find_row(rows, 'RB', 'high')['price_per_adult'] == Decimal('165')
        assert find_row(rows, 'RB', 'high')['cost'] == Decimal('170')

    def test_three_islands_adds_activities(self):
        rows = make_engine().build_matrix(pax_options=[2])
        rb3i = find_row(rows, 'RB3I')

        assert rb3i['breakdown']['activities_price_per_adult'] == Decimal('62.5')
        assert rb3i['price_per_adult'] == Decimal('213')
        assert rb3i['cost'] == Decimal('320')
        assert rb3i['profit_per_adult'] == Decimal('53')

    def test_three_islands_rounds_the_rounded_base_package(self):
        engine = make_engine(
            meals=[meal('BO', '10', '20.4')],
            pricing_config=PricingConfig(
                price_boat_adult=Decimal('30'),
                price_activities_3i=Decimal('0.40'),
            ),
        )
        rows = engine.build_matrix(pax_options=[2])

        # RB: 100 + 20.4 + 30 = 150.4 -> 150; RB3I: 150 + 0.4 -> 150 (not 151)
        assert find_row(rows, 'RB')['price_per_adult'] == Decimal('150')
        assert find_row(rows, 'RB3I')['price_per_adult'] == Decimal('150')

    def test_fullboard_sums_breakfast_lunch_dinner(self):
        meals = [meal('BO', '10', '20'), meal('LO', '15', '30'), meal('DO', '25', '50')]
        rows = make_engine(meals=meals).build_matrix(pax_options=[2])
        fb = find_row(rows, 'FB')

        assert fb['package_name'] == 'Fullboard (B,L,D) + Boat'
        assert fb['breakdown']['fullboard_price_per_adult'] == Decimal('100')
        assert fb['price_per_adult'] == Decimal('230')
        assert fb['cost'] == Decimal('250')
        assert fb['profit_per_adult'] == Decimal('105')

        fb3i = find_row(rows, 'FB3I')
        assert fb3i['price_per_adult'] == Decimal('293')
        assert fb3i['cost'] == Decimal('400')

    def test_single_adult_and_multiple_nights(self):
        rows = make_engine().build_matrix(pax_options=[1])
        single = find_row(rows, 'RB', pax=1)
        assert single['price_per_adult'] == Decimal('250')
        assert single['cost'] == Decimal('160')
        assert single['profit_per_adult'] == Decimal('90')

        rows = make_engine().build_matrix(pax_options=[2], nights=3)
        three_nights = find_row(rows, 'RB')
        assert three_nights['nights'] == 3
        assert three_nights['price_per_adult'] == Decimal('390')
        assert three_nights['cost'] == Decimal('410')
        assert three_nights['profit_per_adult'] == Decimal('185')

    def test_round_to_five(self):
        rows = make_engine(round_to_rm5=True, room_price='206').build_matrix(pax_options=[2])
        # 103 + 20 + 30 = 153 -> 155
        assert find_row(rows, 'RB')['price_per_adult'] == Decimal('155')

    def test_matrix_shape_and_disabled_packages(self):
        rows = make_engine(configs=package_configs('RBB')).build_matrix(pax_options=[1, 2])

        assert len(rows) == 3 * 2 * 4
        assert 'RBB' not in {row['package_code'] for row in rows}
        assert [row['package_code'] for row in rows[:4]] == ['RB', 'RB3I', 'FB', 'FB3I']

    def test_empty_without_config_or_rooms(self):
        engine = make_engine()
        engine.pricing_config = None
        assert engine.build_matrix() == []

        engine = make_engine()
        engine.room_types = []
        assert engine.build_matrix() == []

    def test_default_pax_options(self):
        rows = make_engine().build_matrix()
        assert sorted({row['pax'] for row in rows}) == [1, 2, 3, 4]


class TestMealComposites:

    def test_calculate_composite(self):
        meals = [meal('BO', '10', '20', '5', '10'), meal('LO', '15', '30', '8', '15')]
        assert calculate_composite(meals, ['BO', 'LO', 'DO']) == {
            'cost_adult': Decimal('25'),
            'cost_child': Decimal('13'),
            'price_adult': Decimal('50'),
            'price_child': Decimal('25'),
        }

    def test_recalculate_composites_chain(self):
        meals = [
            meal('BO', '10', '20'), meal('LO', '15', '30'), meal('DO', '25', '50'),
            meal('HT', '5', '10'), meal('SU', '8', '12'),
            meal('FB', '0', '0'), meal('FBA', '0', '0'), meal('FBB', '0', '0'),
        ]

        composites = recalculate_composites(meals)

        assert composites['FB']['price_adult'] == Decimal('100')
        assert composites['FBA']['price_adult'] == Decimal('110')
        assert composites['FBB']['price_adult'] == Decimal('122')
        assert composites['FBB']['cost_adult'] == Decimal('63')

    def test_recalculate_skips_missing_parts(self):
        meals = [meal('BO', '10', '20'), meal('FB', '1', '1'), meal('FBA', '0', '0')]
        composites = recalculate_composites(meals)
        assert set(composites) == {'FB'}


class TestBookingTotals:

    def test_addon_totals(self):
        config = PricingConfig(addons={
            'BBQ': {'cost_adult': '40', 'cost_child': '20', 'price_adult': '80', 'price_child': '40'},
        })
        assert addon_totals(config, 'BBQ', 2, 1) == (Decimal('100'), Decimal('200'))
        assert addon_totals(config, 'HMOON', 2, 0) == (Decimal('0'), Decimal('0'))

    def test_calc_booking_totals(self):
        totals = calc_booking_totals(
            nights=2,
            room_multiplier=1,
            pax_adult=2,
            pax_child=1,
            cost_room=Decimal('100'),
            price_room=Decimal('200'),
            meal_cost_adult=Decimal('10'),
            meal_cost_child=Decimal('5'),
            meal_price_adult=Decimal('20'),
            meal_price_child=Decimal('10'),
            season_mult=Decimal('1.15'),
            margin_pct=Decimal('10'),
            overhead_mode='per_room_day',
            overhead_per_room_day=Decimal('20'),
        )

        assert totals['cost_total'] == Decimal('290')
        assert totals['price_total'] == Decimal('635')
        assert totals['profit_total'] == Decimal('345')

    def test_fixed_overhead_and_whole_rounding(self):
        totals = calc_booking_totals(
            nights=1,
            room_multiplier=1,
            pax_adult=1,
            pax_child=0,
            cost_room=Decimal('100'),
            price_room=Decimal('151'),
            overhead_mode='fixed_per_package',
            overhead_fixed_per_package=Decimal('30'),
            round_to_rm5=False,
        )
        assert totals['cost_total'] == Decimal('130')
        assert totals['price_total'] == Decimal('151')


@pytest.mark.django_db
def test_build_packages_matrix_from_repository(repository, resort, sea_view, sea_view_2025):
    config = resort.pricing_config
    config.boat_cost_return_trip = Decimal('50')
    config.price_boat_adult = Decimal('30')
    config.save()
    MealPlan.objects.create(resort=resort, code='BO', cost_adult=Decimal('10'), price_adult=Decimal('20'))

    rows = build_packages_matrix(repository, 2025, pax_options=[2])

    assert len(rows) == 15
    rb = find_row(rows, 'RB')
    assert rb['room_type_id'] == sea_view.id
    assert rb['price_per_adult'] == Decimal('150')
    assert rb['cost'] == Decimal('170')
    assert rb['profit_per_adult'] == Decimal('65')
