"""
Quick-paste rate parsing.

Turns newline-delimited text pasted into the rate editors into per-room
updates. Room names are lower-cased; matching against room types happens
in apply_quick_paste()/apply_quick_paste_base().

Three-season lines are tried against these grammars, first match wins:

    SeaView low=400 mid=440 high=520
    SeaView: 400, 440, 520
    SeaView | 400 | 440 | 520
    SeaView,400,440,520
    Sea View 400 440 520

Single-value lines:

    SeaView - 400
    SeaView, 400
    Sea View 400
"""

import copy
import re
from collections import namedtuple

from resort_pricing.models import SEASONS
from .money import ZERO, ONE, HUNDRED, to_decimal, parse_number, round_whole

SEASON_MODE_SINGLE = 'single'
SEASON_MODE_THREE = 'three'

APPLY_PRICE = 'price'
APPLY_COST = 'cost'
APPLY_BOTH = 'both'

QuickPasteResult = namedtuple('QuickPasteResult', ['results', 'errors'])

KEYED_PATTERNS = {
    season: re.compile(rf'{season}[=\s]+(\d+\.?\d*)', re.IGNORECASE)
    for season in SEASONS
}


class LineError(ValueError):
    """A line matched a grammar but cannot be used."""


# =============================================================================
# THREE-SEASON MATCHERS
#
# Each matcher returns None when the line is not in its grammar, otherwise
# (name, [low, mid, high]) where missing parts are left empty. Lines in the
# grammar but with the wrong shape raise LineError.
# =============================================================================

def _need_three(name, count):
    return LineError(f"{name}: Need 3 numbers (Low, Mid, High), found {count}")


def _trailing_numbers(parts):
    """Split tokens into (name tokens, trailing numeric values)."""
    numbers = []
    for index in range(len(parts) - 1, -1, -1):
        value = parse_number(parts[index])
        if value is None:
            return parts[:index + 1], numbers
        numbers.insert(0, value)
    return [], numbers


def match_keyed(line):
    if not all(f'{season}=' in line.lower() for season in SEASONS):
        return None
    matches = [KEYED_PATTERNS[season].search(line) for season in SEASONS]
    if not all(matches):
        return '', []
    name = line[:line.lower().index('low')].strip()
    return name, [to_decimal(match.group(1)) for match in matches]


def match_colon(line):
    if ':' not in line:
        return None
    parts = line.split(':')
    if len(parts) != 2:
        return '', []
    name = parts[0].strip()
    numbers = [parse_number(part.strip()) for part in parts[1].split(',')]
    numbers = [number for number in numbers if number is not None]
    if numbers and len(numbers) != 3:
        raise _need_three(name, len(numbers))
    return name, numbers


def match_pipe(line):
    if '|' not in line:
        return None
    parts = [part.strip() for part in line.split('|')]
    if len(parts) < 4:
        raise LineError("Pipe format: Need 4 parts (Name | Low | Mid | High)")
    return parts[0], [parse_number(part) or ZERO for part in parts[1:4]]


def match_comma(line):
    if ',' not in line:
        return None
    parts = [part.strip() for part in line.split(',')]
    if len(parts) != 4:
        raise LineError("Comma format: Need 4 parts (Name,Low,Mid,High)")
    return parts[0], [parse_number(part) or ZERO for part in parts[1:4]]


def match_trailing_numbers(line):
    name_parts, numbers = _trailing_numbers(line.split())
    if not name_parts:
        return '', []
    name = ' '.join(name_parts)
    if numbers and len(numbers) != 3:
        raise _need_three(name, len(numbers))
    return name, numbers


THREE_SEASON_MATCHERS = [
    match_keyed,
    match_colon,
    match_pipe,
    match_comma,
    match_trailing_numbers,
]


def parse_three_season_line(line):
    """
    Parse one line into {'name', 'low', 'mid', 'high'}.

    Raises LineError when the line cannot be used; all three values must be
    positive.
    """
    for matcher in THREE_SEASON_MATCHERS:
        matched = matcher(line)
        if matched is None:
            continue
        name, values = matched
        if name and len(values) == 3 and all(value > 0 for value in values):
            low, mid, high = values
            return {'name': name.lower(), 'low': low, 'mid': mid, 'high': high}
        break
    raise LineError(f"Could not parse line: {line}")


# =============================================================================
# SINGLE-VALUE GRAMMAR
# =============================================================================

def parse_single_value_line(line):
    """Parse 'Name - 400', 'Name, 400' or 'Name 400' into {'name', 'value'}."""
    name, value = '', ZERO

    for separator in ('-', ','):
        if separator in line:
            parts = line.split(separator)
            name = parts[0].strip()
            value = parse_number(parts[1].strip()) or ZERO
            break
    else:
        parts = line.split()
        if len(parts) >= 2:
            number = parse_number(parts[-1])
            if number is not None:
                name = ' '.join(parts[:-1])
                value = number

    if name and value > 0:
        return {'name': name.lower(), 'value': value}
    raise LineError(f"Could not parse line: {line}")


def parse_quick_paste(text, season_mode=SEASON_MODE_SINGLE):
    """
    Parse pasted rates.

    Returns:
        QuickPasteResult(results, errors). Lines with errors are left out of
        results; blank lines are skipped.
    """
    parse_line = parse_three_season_line if season_mode == SEASON_MODE_THREE else parse_single_value_line
    results = []
    errors = []

    for line in (text or '').split('\n'):
        cleaned = line.strip()
        if not cleaned:
            continue
        try:
            results.append(parse_line(cleaned))
        except LineError as e:
            errors.append(str(e))

    return QuickPasteResult(results, errors)


def parse_quick_paste_base(text):
    """
    Parse 'RoomName Cost Price' lines for the annual base-rate editor.

    Returns:
        QuickPasteResult with {'name', 'cost', 'price'} rows
    """
    results = []
    errors = []

    for line in (text or '').split('\n'):
        cleaned = line.strip()
        if not cleaned:
            continue

        parts = cleaned.split()
        if len(parts) < 3:
            errors.append("Line needs 3 values: RoomName Cost Price")
            continue

        name_parts, numbers = _trailing_numbers(parts)
        if name_parts and len(numbers) == 2:
            cost, price = numbers
            results.append({'name': ' '.join(name_parts).lower(), 'cost': cost, 'price': price})
        else:
            errors.append(f"Could not parse line: {line}")

    return QuickPasteResult(results, errors)


# =============================================================================
# APPLYING TO AN EDITOR TABLE
#
# Seasonal rows:  {'room_type_id', 'room_type_name',
#                  'low': {'cost_per_night', 'price_per_night'}, 'mid': ..., 'high': ...}
# Base rows:      {'room_type_id', 'room_type_name', 'cost', 'price'}
# =============================================================================

def _rooms_by_name(rates):
    """Lower-cased name -> row; the first row wins when names differ only in case."""
    rooms = {}
    for rate in rates:
        rooms.setdefault(rate['room_type_name'].lower(), rate)
    return rooms


def apply_quick_paste(rates, parsed, apply_to=APPLY_PRICE, seasons=SEASONS,
                      season_mode=SEASON_MODE_SINGLE):
    """
    Apply parsed rows to a copy of the seasonal rate table.

    Three-season rows set low/mid/high for price, cost or both. Single-value
    rows set the value on each season in `seasons` for price or cost.

    Returns:
        {'updated_rates', 'matched_count', 'cells_updated', 'unknown_rooms'}
    """
    updated_rates = copy.deepcopy(list(rates))
    rooms = _rooms_by_name(updated_rates)
    matched_count = 0
    cells_updated = 0
    unknown_rooms = []

    for item in parsed:
        room = rooms.get(item['name'])
        if room is None:
            unknown_rooms.append(item['name'])
            continue

        matched_count += 1

        if season_mode == SEASON_MODE_THREE:
            targets = []
            if apply_to in (APPLY_PRICE, APPLY_BOTH):
                targets.append('price_per_night')
            if apply_to in (APPLY_COST, APPLY_BOTH):
                targets.append('cost_per_night')
            for field in targets:
                for season in SEASONS:
                    room[season][field] = item[season]
                    cells_updated += 1
        elif apply_to in (APPLY_PRICE, APPLY_COST):
            field = f'{apply_to}_per_night'
            for season in seasons:
                room[season][field] = item['value']
                cells_updated += 1

    return {
        'updated_rates': updated_rates,
        'matched_count': matched_count,
        'cells_updated': cells_updated,
        'unknown_rooms': unknown_rooms,
    }


def apply_quick_paste_base(rates, parsed):
    """Apply parsed 'Name Cost Price' rows to a copy of the base-rate table."""
    updated_rates = copy.deepcopy(list(rates))
    rooms = _rooms_by_name(updated_rates)
    matched_count = 0
    unknown_rooms = []

    for item in parsed:
        room = rooms.get(item['name'])
        if room is None:
            unknown_rooms.append(item['name'])
            continue
        room['cost'] = item['cost']
        room['price'] = item['price']
        matched_count += 1

    return {
        'updated_rates': updated_rates,
        'matched_count': matched_count,
        'unknown_rooms': unknown_rooms,
    }


def apply_percentage_markup(rates, percentage, seasons=SEASONS):
    """Raise (or lower) prices of the given seasons by a percentage, rounded whole."""
    updated_rates = copy.deepcopy(list(rates))
    factor = ONE + to_decimal(percentage) / HUNDRED
    for rate in updated_rates:
        for season in seasons:
            current = to_decimal(rate[season]['price_per_night'])
            rate[season]['price_per_night'] = round_whole(current * factor)
    return updated_rates


def copy_low_to_mid_high(rates):
    """Copy each room's low-season cost and price into mid and high."""
    updated_rates = copy.deepcopy(list(rates))
    for rate in updated_rates:
        for season in ('mid', 'high'):
            rate[season]['cost_per_night'] = rate['low']['cost_per_night']
            rate[season]['price_per_night'] = rate['low']['price_per_night']
    return updated_rates
