"""
Package models: MealPlan, Activity, PricingConfig, PackageConfig.
"""

from decimal import Decimal

from django.db import models

from .core import Resort

PACKAGE_RB = 'RB'
PACKAGE_RBB = 'RBB'
PACKAGE_RB3I = 'RB3I'
PACKAGE_FB = 'FB'
PACKAGE_FB3I = 'FB3I'

# Canonical variants, in display order.
PACKAGE_NAMES = {
    PACKAGE_RB: 'Room & Breakfast',
    PACKAGE_RBB: 'Room + Breakfast + Boat',
    PACKAGE_RB3I: 'Room + Breakfast + 3 Islands',
    PACKAGE_FB: 'Fullboard (B,L,D) + Boat',
    PACKAGE_FB3I: 'Fullboard + 3 Islands',
}


def _money(**kwargs):
    return models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'), **kwargs)


class MealPlan(models.Model):
    """
    Meal cost/price per adult and child.

    Atomic codes: BO (breakfast), LO (lunch), DO (dinner), HT (high tea),
    SU (supper). Composite codes FB, FBA and FBB hold snapshotted sums that
    only change when recalculate_composites() is run and saved.
    """
    resort = models.ForeignKey(
        Resort,
        on_delete=models.CASCADE,
        related_name='meal_plans',
    )
    code = models.CharField(max_length=10)
    name = models.CharField(max_length=100, blank=True, default='')
    cost_adult = _money()
    cost_child = _money()
    price_adult = _money()
    price_child = _money()
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['resort', 'code']
        verbose_name = "Meal Plan"
        verbose_name_plural = "Meal Plans"
        constraints = [
            models.UniqueConstraint(fields=['resort', 'code'], name='unique_meal_plan_code'),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}" if self.name else self.code


class Activity(models.Model):
    """Excursion priced per trip (resort- or vendor-operated) plus per pax."""
    COST_SOURCE_RESORT = 'resort'
    COST_SOURCE_VENDOR = 'vendor'
    COST_SOURCE_CHOICES = [
        (COST_SOURCE_RESORT, 'Resort-operated'),
        (COST_SOURCE_VENDOR, 'Vendor-operated'),
    ]

    resort = models.ForeignKey(
        Resort,
        on_delete=models.CASCADE,
        related_name='activities',
    )
    code = models.CharField(max_length=20)
    name = models.CharField(max_length=100, blank=True, default='')
    cost_trip_resort = _money(help_text="Trip cost when the resort runs it")
    cost_trip_vendor = _money(help_text="Trip cost when a vendor runs it")
    cost_adult = _money()
    cost_child = _money()
    price_adult = _money()
    price_child = _money()
    default_cost_source = models.CharField(
        max_length=10,
        choices=COST_SOURCE_CHOICES,
        default=COST_SOURCE_RESORT,
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['resort', 'code']
        verbose_name = "Activity"
        verbose_name_plural = "Activities"
        constraints = [
            models.UniqueConstraint(fields=['resort', 'code'], name='unique_activity_code'),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}" if self.name else self.code

    def get_trip_cost(self, source=None):
        """Trip cost for the given source (defaults to default_cost_source)."""
        source = source or self.default_cost_source
        if source == self.COST_SOURCE_VENDOR:
            return self.cost_trip_vendor
        return self.cost_trip_resort


class PricingConfig(models.Model):
    """
    Per-resort pricing singleton: boat transfer, 3-island activities,
    add-on table and profit margin.

    The boat cost is paid once per booking (return trip); the boat price is
    charged per adult/child.

    `addons` maps an add-on code to its per-adult/per-child cost and price:
        {"BBQ": {"cost_adult": "40", "cost_child": "20",
                 "price_adult": "80", "price_child": "40"}, ...}
    """
    resort = models.OneToOneField(
        Resort,
        on_delete=models.CASCADE,
        related_name='pricing_config',
    )
    boat_cost_return_trip = _money()
    price_boat_adult = _money()
    price_boat_child = _money()
    activities_3i_cost_trip = _money(help_text="3-island trip cost, once per booking")
    cost_activities_3i = _money(help_text="3-island variable cost per pax")
    price_activities_3i = _money(help_text="3-island price per pax")
    addons = models.JSONField(default=dict, blank=True)
    profit_margin_pct = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal('0.00'),
    )

    class Meta:
        verbose_name = "Pricing Config"
        verbose_name_plural = "Pricing Configs"

    def __str__(self):
        return f"Pricing config for {self.resort}"


class PackageConfig(models.Model):
    """
    Enables/disables a package variant. The includes_* flags are descriptive
    only; the composition math decides which meals feed which variant.
    """
    resort = models.ForeignKey(
        Resort,
        on_delete=models.CASCADE,
        related_name='package_configs',
    )
    package_code = models.CharField(max_length=10)
    package_name = models.CharField(max_length=100, blank=True, default='')
    includes_room = models.BooleanField(default=True)
    includes_breakfast = models.BooleanField(default=False)
    includes_lunch = models.BooleanField(default=False)
    includes_dinner = models.BooleanField(default=False)
    includes_boat = models.BooleanField(default=False)
    includes_activities_3i = models.BooleanField(default=False)
    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['resort', 'sort_order', 'package_code']
        verbose_name = "Package Config"
        verbose_name_plural = "Package Configs"
        constraints = [
            models.UniqueConstraint(
                fields=['resort', 'package_code'],
                name='unique_package_code',
            ),
        ]

    def __str__(self):
        status = "" if self.is_active else " [INACTIVE]"
        return f"{self.package_code} - {self.package_name}{status}"
