"""
Package Composition Service
===========================

Builds the package price matrix: every active room type × season × adult
count, priced as the five canonical packages.

Per room type, season and pax (adults only, children = 0):

    room_price_per_adult = season room price × nights / max(1, pax)
    meal_per_adult       = meal total price / max(1, adults + children)

    RB   per adult = round(room + breakfast + boat price per adult)
    RBB  same as RB (the boat is already part of RB)
    RB3I per adult = round(RB per adult + activities per adult)
    FB   per adult = round(room + fullboard (BO+LO+DO) + boat price per adult)
    FB3I per adult = round(FB per adult + activities per adult)

    cost = room cost per adult × pax + boat cost (once) + meal cost
           (+ 3-island trip cost + per-pax activity cost for *3I)
    profit per adult = (per adult × pax - cost) / pax

"round" is to the nearest 5 when SeasonSettings.round_to_rm5 is on, else to
the nearest whole amount. The *3I variants round the already-rounded base
package again after adding activities.
"""

import logging

from resort_pricing.conf import get_setting
from resort_pricing.models import (
    SEASONS,
    PACKAGE_RB,
    PACKAGE_RBB,
    PACKAGE_RB3I,
    PACKAGE_FB,
    PACKAGE_FB3I,
    PACKAGE_NAMES,
)
from .money import ZERO, ONE, HUNDRED, to_decimal, round_rm5
from .rate_service import season_multipliers

logger = logging.getLogger(__name__)

BREAKFAST_CODE = 'BO'
FULLBOARD_CODES = ('BO', 'LO', 'DO')

OVERHEAD_PER_ROOM_DAY = 'per_room_day'
OVERHEAD_FIXED_PER_PACKAGE = 'fixed_per_package'

MEAL_FIELDS = ('cost_adult', 'cost_child', 'price_adult', 'price_child')


# =============================================================================
# MEALS
# =============================================================================

def _find_meal(meals, code):
    for meal in meals:
        if meal.code == code:
            return meal
    return None


def meal_totals(meals, code, pax_adult, pax_child, nights=1):
    """(cost, price) of one meal code for the party over the stay; (0, 0) if unknown."""
    meal = _find_meal(meals, code)
    if meal is None:
        return ZERO, ZERO
    cost = (to_decimal(meal.cost_adult) * pax_adult + to_decimal(meal.cost_child) * pax_child) * nights
    price = (to_decimal(meal.price_adult) * pax_adult + to_decimal(meal.price_child) * pax_child) * nights
    return cost, price


def combined_meal_totals(meals, codes, pax_adult, pax_child, nights=1):
    cost, price = ZERO, ZERO
    for code in codes:
        meal_cost, meal_price = meal_totals(meals, code, pax_adult, pax_child, nights)
        cost += meal_cost
        price += meal_price
    return cost, price


def calculate_composite(meals, codes):
    """Sum the per-person cost/price fields of the given meal codes."""
    composite = {field: ZERO for field in MEAL_FIELDS}
    for code in codes:
        meal = _find_meal(meals, code)
        if meal is None:
            continue
        for field in MEAL_FIELDS:
            composite[field] += to_decimal(getattr(meal, field))
    return composite


def recalculate_composites(meals):
    """
    Recompute the composite meal plans from their parts:
        FB  = BO + LO + DO
        FBA = FB + HT
        FBB = FBA + SU

    Returns {code: {cost_adult, cost_child, price_adult, price_child}} for
    the composite codes present in `meals`. FBA needs HT and FBB needs SU;
    each builds on the freshly computed value of the previous one. Nothing
    is saved.
    """
    composites = {}

    if _find_meal(meals, 'FB') is not None:
        composites['FB'] = calculate_composite(meals, FULLBOARD_CODES)

    chain = (('FBA', 'FB', 'HT'), ('FBB', 'FBA', 'SU'))
    for target, base_code, extra_code in chain:
        base = composites.get(base_code)
        if base is None:
            base_meal = _find_meal(meals, base_code)
            if base_meal is not None:
                base = {field: to_decimal(getattr(base_meal, field)) for field in MEAL_FIELDS}
        extra = _find_meal(meals, extra_code)
        if base is None or extra is None or _find_meal(meals, target) is None:
            continue
        composites[target] = {
            field: base[field] + to_decimal(getattr(extra, field))
            for field in MEAL_FIELDS
        }

    return composites


# =============================================================================
# ADD-ONS & PER-BOOKING TOTALS
# =============================================================================

def addon_totals(pricing_config, code, pax_adult=0, pax_child=0):
    """
    (cost, price) of an add-on (e.g. 'BBQ') for the party, from the
    PricingConfig add-on table. Unknown codes cost nothing.
    """
    addons = (getattr(pricing_config, 'addons', None) or {}) if pricing_config else {}
    entry = addons.get(code)
    if not entry:
        return ZERO, ZERO
    cost = to_decimal(entry.get('cost_adult')) * pax_adult + to_decimal(entry.get('cost_child')) * pax_child
    price = to_decimal(entry.get('price_adult')) * pax_adult + to_decimal(entry.get('price_child')) * pax_child
    return cost, price


def calc_booking_totals(nights, room_multiplier, pax_adult, pax_child,
                        cost_room, price_room,
                        meal_cost_adult=ZERO, meal_cost_child=ZERO,
                        meal_price_adult=ZERO, meal_price_child=ZERO,
                        boat_cost_adult=ZERO, boat_cost_child=ZERO,
                        boat_price_adult=ZERO, boat_price_child=ZERO,
                        addons_cost=ZERO, addons_price=ZERO,
                        season_mult=None, surcharges_pct=ZERO, margin_pct=ZERO,
                        overhead_mode=None, overhead_per_room_day=ZERO,
                        overhead_fixed_per_package=ZERO, round_to_rm5=True):
    """
    Cost, price and profit of a single booking, children included.

    Room, meals and boat are charged per night. The price is the base price
    × season multiplier (a factor such as 1.15, missing = 1) × (1 + surcharge
    %) × (1 + margin %), rounded to 5 (or whole). Overhead only adds to cost.

    Returns:
        {'cost_total', 'price_total', 'profit_total'}
    """
    nights = to_decimal(nights)
    room_multiplier = to_decimal(room_multiplier)

    room_cost = to_decimal(cost_room) * room_multiplier * nights
    room_price = to_decimal(price_room) * room_multiplier * nights
    meals_cost = (to_decimal(meal_cost_adult) * pax_adult + to_decimal(meal_cost_child) * pax_child) * nights
    meals_price = (to_decimal(meal_price_adult) * pax_adult + to_decimal(meal_price_child) * pax_child) * nights
    boat_cost = (to_decimal(boat_cost_adult) * pax_adult + to_decimal(boat_cost_child) * pax_child) * nights
    boat_price = (to_decimal(boat_price_adult) * pax_adult + to_decimal(boat_price_child) * pax_child) * nights

    base_cost = room_cost + meals_cost + boat_cost + to_decimal(addons_cost)
    base_price = room_price + meals_price + boat_price + to_decimal(addons_price)

    overhead = ZERO
    if overhead_mode == OVERHEAD_PER_ROOM_DAY:
        overhead = to_decimal(overhead_per_room_day) * nights
    elif overhead_mode == OVERHEAD_FIXED_PER_PACKAGE:
        overhead = to_decimal(overhead_fixed_per_package)

    cost_total = base_cost + overhead
    season_price = base_price * (to_decimal(season_mult) or ONE)
    after_surcharges = season_price * (ONE + to_decimal(surcharges_pct) / HUNDRED)
    with_margin = after_surcharges * (ONE + to_decimal(margin_pct) / HUNDRED)
    price_total = round_rm5(with_margin, round_to_rm5)

    return {
        'cost_total': cost_total,
        'price_total': price_total,
        'profit_total': price_total - cost_total,
    }


# =============================================================================
# PACKAGE MATRIX
# =============================================================================

class PackageCompositionEngine:
    """
    Package matrix over a point-in-time snapshot of the resort's data.

    Usage:
        engine = PackageCompositionEngine(
            room_types=repository.fetch_room_types(),
            base_rates=repository.fetch_annual_base_rates(room_ids, 2025),
            season_settings=repository.fetch_season_settings(),
            pricing_config=repository.fetch_pricing_config(),
            meal_plans=repository.fetch_meal_plans(active_only=True),
            package_configs=repository.fetch_package_configs(),
        )
        rows = engine.build_matrix(pax_options=(1, 2), nights=3)
    """

    def __init__(self, room_types, base_rates, season_settings, pricing_config,
                 meal_plans, package_configs):
        self.room_types = list(room_types or [])
        self.base_rates = {rate.room_type_id: rate for rate in (base_rates or [])}
        self.season_settings = season_settings
        self.pricing_config = pricing_config
        self.meal_plans = list(meal_plans or [])
        self.enabled_packages = {
            config.package_code: config
            for config in (package_configs or [])
            if getattr(config, 'is_active', True)
        }
        self.round_to_rm5 = bool(season_settings and season_settings.round_to_rm5)

    def _round(self, value):
        return round_rm5(value, self.round_to_rm5)

    def _room_rate(self, room_type):
        rate = self.base_rates.get(room_type.id)
        if rate is None:
            return ZERO, ZERO
        return to_decimal(rate.cost_base_per_night), to_decimal(rate.price_base_per_night)

    def _package_name(self, code):
        config = self.enabled_packages.get(code)
        return (config.package_name if config else '') or PACKAGE_NAMES[code]

    def build_matrix(self, pax_options=None, nights=1):
        """
        Returns:
            list of rows: {package_code, package_name, room_type_id,
            room_type, season, pax, nights, cost, price_per_adult,
            profit_per_adult, breakdown}
        """
        if self.pricing_config is None or not self.room_types:
            logger.debug("No pricing config or room types, package matrix is empty")
            return []

        if pax_options is None:
            pax_options = get_setting('DEFAULT_PAX_OPTIONS')

        multipliers = season_multipliers(self.season_settings)
        rows = []

        for room_type in self.room_types:
            room_cost, room_price_base = self._room_rate(room_type)
            for season in SEASONS:
                room_price_season = room_price_base * (ONE + multipliers[season] / HUNDRED)
                for pax in pax_options:
                    rows.extend(self._build_variants(
                        room_type, season, pax, nights, room_cost, room_price_season
                    ))

        return rows

    def _build_variants(self, room_type, season, pax, nights, room_cost, room_price_season):
        config = self.pricing_config
        pax_adult, pax_child = pax, 0
        total_pax = pax_adult + pax_child
        room_share_divisor = max(1, pax_adult)
        meal_divisor = max(1, total_pax)
        profit_divisor = pax_adult or 1

        # Boat: cost once per booking (return trip), price per head
        boat_cost = to_decimal(config.boat_cost_return_trip)
        boat_price_per_adult = to_decimal(config.price_boat_adult)
        boat_price_total = boat_price_per_adult * pax_adult + to_decimal(config.price_boat_child) * pax_child

        # Activities: once per trip, not per night
        activities_cost = (
            to_decimal(config.activities_3i_cost_trip)
            + to_decimal(config.cost_activities_3i) * total_pax
        )
        activities_price_total = to_decimal(config.price_activities_3i) * total_pax
        activities_price_per_adult = activities_price_total / meal_divisor

        room_price_per_adult = (room_price_season * nights) / room_share_divisor
        room_cost_per_adult = (room_cost * nights) / room_share_divisor
        room_cost_total = room_cost_per_adult * pax_adult

        common = {
            'room_cost': room_cost_total,
            'room_price': room_price_per_adult * pax_adult,
            'boat_cost': boat_cost,
            'boat_price': boat_price_total,
            'room_price_per_adult': room_price_per_adult,
            'boat_price_per_adult': boat_price_per_adult,
        }

        # Room & breakfast
        breakfast_cost, breakfast_price = meal_totals(
            self.meal_plans, BREAKFAST_CODE, pax_adult, pax_child, nights
        )
        breakfast_price_per_adult = breakfast_price / meal_divisor
        rb_per_adult = self._round(room_price_per_adult + breakfast_price_per_adult + boat_price_per_adult)
        rb_cost = room_cost_total + boat_cost + breakfast_cost

        rb_breakdown = dict(
            common,
            meal_cost=breakfast_cost,
            meal_price=breakfast_price,
            room_cost_per_adult=room_cost_per_adult,
            breakfast_price_per_adult=breakfast_price_per_adult,
        )

        # Fullboard
        fb_cost_meals, fb_price_meals = combined_meal_totals(
            self.meal_plans, FULLBOARD_CODES, pax_adult, pax_child, nights
        )
        fb_price_per_adult = fb_price_meals / meal_divisor
        fb_per_adult = self._round(room_price_per_adult + fb_price_per_adult + boat_price_per_adult)
        fb_cost = room_cost_total + boat_cost + fb_cost_meals

        fb_breakdown = dict(
            common,
            meal_cost=fb_cost_meals,
            meal_price=fb_price_meals,
            fullboard_price_per_adult=fb_price_per_adult,
        )

        activities = {
            'activities_cost': activities_cost,
            'activities_price': activities_price_total,
            'activities_price_per_adult': activities_price_per_adult,
        }

        variants = [
            (PACKAGE_RB, rb_per_adult, rb_cost, rb_breakdown),
            (PACKAGE_RBB, rb_per_adult, rb_cost, rb_breakdown),
            (PACKAGE_RB3I, self._round(rb_per_adult + activities_price_per_adult),
             rb_cost + activities_cost, dict(rb_breakdown, **activities)),
            (PACKAGE_FB, fb_per_adult, fb_cost, fb_breakdown),
            (PACKAGE_FB3I, self._round(fb_per_adult + activities_price_per_adult),
             fb_cost + activities_cost, dict(fb_breakdown, **activities)),
        ]

        rows = []
        for code, per_adult, cost, breakdown in variants:
            if code not in self.enabled_packages:
                continue
            total_price = per_adult * pax_adult
            rows.append({
                'package_code': code,
                'package_name': self._package_name(code),
                'room_type_id': room_type.id,
                'room_type': room_type.name,
                'season': season,
                'pax': pax,
                'nights': nights,
                'cost': cost,
                'price_per_adult': per_adult,
                'profit_per_adult': (total_price - cost) / profit_divisor,
                'breakdown': dict(breakdown, price_per_adult=per_adult, total_price=total_price),
            })
        return rows


def build_packages_matrix(repository, year, pax_options=None, nights=1):
    """Load the resort's snapshot for `year` and build the package matrix."""
    room_types = repository.fetch_room_types()
    engine = PackageCompositionEngine(
        room_types=room_types,
        base_rates=repository.fetch_annual_base_rates([room.id for room in room_types], year),
        season_settings=repository.fetch_season_settings(),
        pricing_config=repository.fetch_pricing_config(),
        meal_plans=repository.fetch_meal_plans(active_only=True),
        package_configs=repository.fetch_package_configs(active_only=True),
    )
    return engine.build_matrix(pax_options=pax_options, nights=nights)
