from decimal import Decimal

import pytest

from resort_pricing.models import Resort, RoomType, AnnualBaseRate
from resort_pricing.repository import PricingRepository


@pytest.fixture
def resort(db):
    return Resort.objects.create(name='Pulau Perhentian Resort', code='perhentian')


@pytest.fixture
def sea_view(resort):
    return RoomType.objects.create(resort=resort, name='Sea View', code='SV', order_index=1)


@pytest.fixture
def garden(resort):
    return RoomType.objects.create(resort=resort, name='Garden Chalet', code='GC', order_index=2)


@pytest.fixture
def repository(resort):
    return PricingRepository(resort)


@pytest.fixture
def sea_view_2025(sea_view):
    return AnnualBaseRate.objects.create(
        room_type=sea_view,
        year=2025,
        cost_base_per_night=Decimal('100.00'),
        price_base_per_night=Decimal('200.00'),
    )
