from decimal import Decimal

from django.utils import timezone

from resort_pricing.services.csv_codec import (
    generate_base_csv,
    generate_csv,
    parse_base_csv_import,
    parse_csv_import,
)

SEASONAL_RATES = [
    {
        'room_type_id': 1,
        'room_type_name': 'Sea View',
        'low': {'cost_per_night': Decimal('150'), 'price_per_night': Decimal('360')},
        'mid': {'cost_per_night': Decimal('160'), 'price_per_night': Decimal('400')},
        'high': {'cost_per_night': Decimal('170.5'), 'price_per_night': Decimal('460')},
    },
    {
        'room_type_id': 2,
        'room_type_name': 'Garden Chalet',
        'low': {'cost_per_night': Decimal('80'), 'price_per_night': Decimal('180')},
        'mid': {'cost_per_night': Decimal('85'), 'price_per_night': Decimal('200')},
        'high': {'cost_per_night': Decimal('90'), 'price_per_night': Decimal('230')},
    },
]

BASE_RATES = [
    {'room_type_id': 1, 'room_type_name': 'Sea View', 'cost': Decimal('100'), 'price': Decimal('200')},
    {'room_type_id': 2, 'room_type_name': 'Garden Chalet', 'cost': Decimal('60.25'), 'price': Decimal('120')},
]


class TestSeasonalCsv:

    def test_generate(self):
        lines = generate_csv(SEASONAL_RATES, 2025).split('\n')
        assert lines[0] == 'room_type,year,low_price,mid_price,high_price,low_cost,mid_cost,high_cost'
        assert lines[1] == 'Sea View,2025,360.00,400.00,460.00,150.00,160.00,170.50'
        assert len(lines) == 3

    def test_round_trip(self):
        imported = parse_csv_import(generate_csv(SEASONAL_RATES, 2025), SEASONAL_RATES)

        assert imported['unknown_rooms'] == []
        assert len(imported['updates']) == 2
        for update, rate in zip(imported['updates'], SEASONAL_RATES):
            assert update['room_type_id'] == rate['room_type_id']
            assert update['year'] == 2025
            for season in ('low', 'mid', 'high'):
                assert update[season] == rate[season]

    def test_columns_in_any_order_and_case(self):
        text = (
            'HIGH_COST,room_type,Low_Price,mid_price,high_price,low_cost,mid_cost,year\n'
            '95,garden chalet,190,210,240,81,86,2026\n'
        )
        update = parse_csv_import(text, SEASONAL_RATES)['updates'][0]
        assert update['room_type_id'] == 2
        assert update['year'] == 2026
        assert update['high'] == {'price_per_night': Decimal('240'), 'cost_per_night': Decimal('95')}

    def test_missing_column_aborts(self):
        text = 'room_type,year,low_price,mid_price,high_price,low_cost,mid_cost\nSea View,2025,1,2,3,4,5\n'
        assert parse_csv_import(text, SEASONAL_RATES) == {'error': 'Missing required column: high_cost'}

    def test_header_only_aborts(self):
        text = 'room_type,year,low_price,mid_price,high_price,low_cost,mid_cost,high_cost\n\n'
        assert parse_csv_import(text, SEASONAL_RATES) == {
            'error': 'CSV must have header and at least one data row'
        }

    def test_unknown_rooms_and_bad_numbers(self):
        text = (
            'room_type,year,low_price,mid_price,high_price,low_cost,mid_cost,high_cost\n'
            'Attic,2025,1,2,3,4,5,6\n'
            'Sea View,next,abc,400,460,150,160,170\n'
        )
        imported = parse_csv_import(text, SEASONAL_RATES)

        assert imported['unknown_rooms'] == ['attic']
        update = imported['updates'][0]
        assert update['year'] == timezone.now().year
        assert update['low']['price_per_night'] == Decimal('0')


class TestBaseCsv:

    def test_generate(self):
        assert generate_base_csv(BASE_RATES, 2025) == (
            'room_type,year,cost_base_per_night,price_base_per_night\n'
            'Sea View,2025,100.00,200.00\n'
            'Garden Chalet,2025,60.25,120.00'
        )

    def test_round_trip(self):
        imported = parse_base_csv_import(generate_base_csv(BASE_RATES, 2024), BASE_RATES)

        assert imported['unknown_rooms'] == []
        assert [(u['room_type_id'], u['year'], u['cost'], u['price']) for u in imported['updates']] == [
            (1, 2024, Decimal('100'), Decimal('200')),
            (2, 2024, Decimal('60.25'), Decimal('120')),
        ]

    def test_missing_column_aborts(self):
        text = 'room_type,year,cost_base_per_night\nSea View,2025,100\n'
        assert parse_base_csv_import(text, BASE_RATES) == {
            'error': 'Missing required column: price_base_per_night'
        }

    def test_first_room_wins_when_names_differ_only_in_case(self):
        rates = [
            {'room_type_id': 1, 'room_type_name': 'Sea View', 'cost': Decimal('0'), 'price': Decimal('0')},
            {'room_type_id': 7, 'room_type_name': 'SEA VIEW', 'cost': Decimal('0'), 'price': Decimal('0')},
        ]
        text = 'room_type,year,cost_base_per_night,price_base_per_night\nsea view,2025,90,180\n'

        assert [u['room_type_id'] for u in parse_base_csv_import(text, rates)['updates']] == [1]
