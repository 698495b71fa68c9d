from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from sanatoni.promotions.models import FlashSale


@pytest.fixture
def now():
    return timezone.now()


@pytest.fixture
def make_sale(db, now):
    def factory(name="Diwali Sale", discount="20.00", start=-1, end=24, **extra):
        """``start`` and ``end`` are hours relative to now."""
        extra.setdefault("status", FlashSale.Status.ACTIVE)
        return FlashSale.objects.create(
            name=name,
            discount_percentage=Decimal(discount),
            start_date=now + timedelta(hours=start),
            end_date=now + timedelta(hours=end),
            **extra,
        )

    return factory
