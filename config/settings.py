"""
Django settings for the Resort Pricing Engine project.
"""

import os
from decimal import Decimal
from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve().parent.parent
env = environ.Env()
environ.Env.read_env(os.path.join(BASE_DIR, '.env'))

SECRET_KEY = env('DJANGO_SECRET_KEY', default='resort-pricing-dev-key')
DEBUG = env.bool('DJANGO_DEBUG', default=False)
ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=[])

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'resort_pricing.apps.ResortPricingConfig',
]

DATABASES = {
    'default': {
        'ENGINE': env('PRICING_DB_ENGINE', default='django.db.backends.sqlite3'),
        'NAME': env('PRICING_DB_NAME', default=str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'Asia/Kuala_Lumpur'

# Engine defaults. Per-resort values always come from SeasonSettings and
# PricingConfig rows; these apply only when a resort has none stored.
RESORT_PRICING = {
    'DEFAULT_SEASON_MULTIPLIERS': {
        'low': Decimal('-10'),
        'mid': Decimal('0'),
        'high': Decimal('15'),
    },
    'DEFAULT_PAX_OPTIONS': (1, 2, 3, 4),
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{levelname} {asctime} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'resort_pricing': {
            'handlers': ['console'],
            'level': env('PRICING_LOG_LEVEL', default='INFO'),
        },
    },
}
