"""
Services package.

Re-exports the pricing services so callers can import from one place:
    from resort_pricing.services import RateResolver, calculate_tax_breakdown
"""

from .rate_service import RateResolver, resolve_nightly_rate, DEFAULT_RESTRICTION
from .promotion_service import PromotionService, apply_promotions_and_surcharges
from .tax_service import TaxService, calculate_tax_breakdown
from .package_service import (
    PackageCompositionEngine,
    build_packages_matrix,
    calc_booking_totals,
    calculate_composite,
    recalculate_composites,
)
from .quick_paste import (
    QuickPasteResult,
    parse_quick_paste,
    parse_quick_paste_base,
    apply_quick_paste,
    apply_quick_paste_base,
)
from .csv_codec import generate_csv, parse_csv_import, generate_base_csv, parse_base_csv_import
from .bulk_service import (
    BulkResult,
    bulk_upsert_base_rates,
    bulk_upsert_seasonal_rates,
    bulk_upsert_meal_plans,
    bulk_upsert_activities,
    bulk_apply_overrides,
    bulk_apply_restrictions,
    set_season_range,
)

__all__ = [
    'RateResolver',
    'resolve_nightly_rate',
    'DEFAULT_RESTRICTION',
    'PromotionService',
    'apply_promotions_and_surcharges',
    'TaxService',
    'calculate_tax_breakdown',
    'PackageCompositionEngine',
    'build_packages_matrix',
    'calc_booking_totals',
    'calculate_composite',
    'recalculate_composites',
    'QuickPasteResult',
    'parse_quick_paste',
    'parse_quick_paste_base',
    'apply_quick_paste',
    'apply_quick_paste_base',
    'generate_csv',
    'parse_csv_import',
    'generate_base_csv',
    'parse_base_csv_import',
    'BulkResult',
    'bulk_upsert_base_rates',
    'bulk_upsert_seasonal_rates',
    'bulk_upsert_meal_plans',
    'bulk_upsert_activities',
    'bulk_apply_overrides',
    'bulk_apply_restrictions',
    'set_season_range',
]
