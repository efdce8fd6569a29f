"""
Resort pricing models package.

Re-exports all models so Django migrations and imports work unchanged:
    from resort_pricing.models import RoomType, RateOverride, etc.
"""

# Core: Resort, room types, seasons
from .core import (
    Resort,
    RoomType,
    SeasonSettings,
    SeasonRange,
    SeasonAssignment,
    SEASON_LOW,
    SEASON_MID,
    SEASON_HIGH,
    SEASONS,
    SEASON_CHOICES,
)

# Rates: base rates, overrides, restrictions
from .rates import (
    AnnualBaseRate,
    SeasonalRate,
    RateOverride,
    RateRestriction,
)

# Packages: meals, activities, pricing config, package switches
from .packages import (
    MealPlan,
    Activity,
    PricingConfig,
    PackageConfig,
    PACKAGE_RB,
    PACKAGE_RBB,
    PACKAGE_RB3I,
    PACKAGE_FB,
    PACKAGE_FB3I,
    PACKAGE_NAMES,
)

# Booking-time adjustments
from .promotions import (
    Promotion,
    Surcharge,
    Tax,
    TARGET_SEASON_ANY,
)

__all__ = [
    # Core
    'Resort', 'RoomType', 'SeasonSettings', 'SeasonRange', 'SeasonAssignment',
    'SEASON_LOW', 'SEASON_MID', 'SEASON_HIGH', 'SEASONS', 'SEASON_CHOICES',
    # Rates
    'AnnualBaseRate', 'SeasonalRate', 'RateOverride', 'RateRestriction',
    # Packages
    'MealPlan', 'Activity', 'PricingConfig', 'PackageConfig',
    'PACKAGE_RB', 'PACKAGE_RBB', 'PACKAGE_RB3I', 'PACKAGE_FB', 'PACKAGE_FB3I', 'PACKAGE_NAMES',
    # Adjustments
    'Promotion', 'Surcharge', 'Tax', 'TARGET_SEASON_ANY',
]
