"""
CSV export/import for the rate editors.

Plain comma-separated text without quoting: room names containing commas
do not survive a round trip.

Seasonal form:
    room_type,year,low_price,mid_price,high_price,low_cost,mid_cost,high_cost
Annual base form:
    room_type,year,cost_base_per_night,price_base_per_night

Import validates the header first; any missing column aborts the whole
import with {'error': ...}. Rows are then matched to rooms by name
(case-insensitive) and unmatched names are collected in unknown_rooms.
"""

from decimal import Decimal

from django.utils import timezone

from resort_pricing.models import SEASONS
from .money import ZERO, to_decimal, parse_number

SEASONAL_COLUMNS = [
    'room_type', 'year',
    'low_price', 'mid_price', 'high_price',
    'low_cost', 'mid_cost', 'high_cost',
]
BASE_COLUMNS = ['room_type', 'year', 'cost_base_per_night', 'price_base_per_night']

TOO_SHORT_ERROR = 'CSV must have header and at least one data row'

TWO_PLACES = Decimal('0.01')


def _fmt(value):
    return str(to_decimal(value).quantize(TWO_PLACES))


def _number(cells, index):
    value = parse_number(cells[index]) if index < len(cells) else None
    return value or ZERO


def _year(cells, index):
    value = parse_number(cells[index]) if index < len(cells) else None
    year = int(value) if value is not None else 0
    return year or timezone.now().year


def _read(csv_text, required_columns):
    """
    Split the text into (column index map, data rows), or return an error
    string when the text is too short or a column is missing.
    """
    lines = [line for line in (csv_text or '').split('\n') if line.strip()]
    if len(lines) < 2:
        return None, None, TOO_SHORT_ERROR

    header = [column.strip() for column in lines[0].lower().split(',')]
    for column in required_columns:
        if column not in header:
            return None, None, f"Missing required column: {column}"

    index = {column: header.index(column) for column in required_columns}
    rows = [[cell.strip() for cell in line.split(',')] for line in lines[1:]]
    return index, rows, None


def _match_rows(rates, rows, index, build_update):
    rooms = {}
    for rate in rates:
        rooms.setdefault(rate['room_type_name'].lower(), rate)
    updates = []
    unknown_rooms = []

    room_idx = index['room_type']
    for cells in rows:
        room_name = cells[room_idx].lower() if room_idx < len(cells) else ''
        room = rooms.get(room_name)
        if room is not None:
            updates.append(dict(
                room_type_id=room['room_type_id'],
                room_type_name=room['room_type_name'],
                year=_year(cells, index['year']),
                **build_update(cells)
            ))
        elif room_name:
            unknown_rooms.append(room_name)

    return {'updates': updates, 'unknown_rooms': unknown_rooms}


# =============================================================================
# SEASONAL RATES
# =============================================================================

def generate_csv(rates, year):
    """Seasonal rate table → CSV text, prices before costs, two decimals."""
    rows = [SEASONAL_COLUMNS]
    for rate in rates:
        rows.append(
            [rate['room_type_name'], str(year)]
            + [_fmt(rate[season]['price_per_night']) for season in SEASONS]
            + [_fmt(rate[season]['cost_per_night']) for season in SEASONS]
        )
    return '\n'.join(','.join(row) for row in rows)


def parse_csv_import(csv_text, rates):
    """
    Seasonal CSV → updates for known rooms.

    Returns:
        {'updates': [{'room_type_id', 'room_type_name', 'year',
                      'low': {'price_per_night', 'cost_per_night'}, ...}],
         'unknown_rooms': [...]}
        or {'error': message}
    """
    index, rows, error = _read(csv_text, SEASONAL_COLUMNS)
    if error:
        return {'error': error}

    def build_update(cells):
        return {
            season: {
                'price_per_night': _number(cells, index[f'{season}_price']),
                'cost_per_night': _number(cells, index[f'{season}_cost']),
            }
            for season in SEASONS
        }

    return _match_rows(rates, rows, index, build_update)


# =============================================================================
# ANNUAL BASE RATES
# =============================================================================

def generate_base_csv(rates, year):
    rows = [BASE_COLUMNS]
    for rate in rates:
        rows.append([rate['room_type_name'], str(year), _fmt(rate['cost']), _fmt(rate['price'])])
    return '\n'.join(','.join(row) for row in rows)


def parse_base_csv_import(csv_text, rates):
    """Annual base-rate CSV → {'updates': [{..., 'cost', 'price'}], 'unknown_rooms'} or {'error'}."""
    index, rows, error = _read(csv_text, BASE_COLUMNS)
    if error:
        return {'error': error}

    def build_update(cells):
        return {
            'cost': _number(cells, index['cost_base_per_night']),
            'price': _number(cells, index['price_base_per_night']),
        }

    return _match_rows(rates, rows, index, build_update)
