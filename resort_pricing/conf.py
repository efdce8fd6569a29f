"""
App-level defaults, overridable through ``settings.RESORT_PRICING``.
"""

from decimal import Decimal

from django.conf import settings

DEFAULTS = {
    'DEFAULT_SEASON_MULTIPLIERS': {
        'low': Decimal('-10'),
        'mid': Decimal('0'),
        'high': Decimal('15'),
    },
    'DEFAULT_PAX_OPTIONS': (1, 2, 3, 4),
}


def get_setting(name):
    """Return a RESORT_PRICING setting, falling back to the app default."""
    overrides = getattr(settings, 'RESORT_PRICING', None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
