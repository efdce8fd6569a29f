"""
Core models: Resort, RoomType and season configuration.
"""

from decimal import Decimal
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db import models

SEASON_LOW = 'low'
SEASON_MID = 'mid'
SEASON_HIGH = 'high'

SEASON_CHOICES = [
    (SEASON_LOW, 'Low'),
    (SEASON_MID, 'Mid'),
    (SEASON_HIGH, 'High'),
]

SEASONS = (SEASON_LOW, SEASON_MID, SEASON_HIGH)


# =============================================================================
# RESORT & ROOM TYPES
# =============================================================================

class Resort(models.Model):
    """
    A resort/property. Owns every rate, season and pricing record.

    Creating a resort auto-creates its SeasonSettings, PricingConfig and
    default PackageConfig rows (see signals.py).
    """
    name = models.CharField(max_length=200, help_text="Resort name")
    code = models.SlugField(
        max_length=50,
        unique=True,
        help_text="URL-friendly code (e.g., 'pulau-resort')"
    )
    currency_symbol = models.CharField(
        max_length=5,
        default='RM',
        help_text="Currency symbol for display"
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Resort"
        verbose_name_plural = "Resorts"

    def __str__(self):
        return self.name


class RoomType(models.Model):
    """Room category. Rates hang off it per year (and per season)."""
    resort = models.ForeignKey(
        Resort,
        on_delete=models.CASCADE,
        related_name='room_types',
    )
    name = models.CharField(max_length=100, help_text="e.g., Sea View, Pool View")
    code = models.CharField(max_length=20, blank=True, default='')
    order_index = models.PositiveIntegerField(default=0, help_text="Display order")
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['resort', 'order_index', 'name']
        verbose_name = "Room Type"
        verbose_name_plural = "Room Types"
        constraints = [
            models.UniqueConstraint(fields=['resort', 'name'], name='unique_room_type_name'),
        ]

    def __str__(self):
        return self.name


# =============================================================================
# SEASONS
# =============================================================================

class SeasonSettings(models.Model):
    """
    Per-resort season multipliers, stored as percentage changes.

    Example: mult_low=-10 means low-season price = base × 0.90.
    """
    resort = models.OneToOneField(
        Resort,
        on_delete=models.CASCADE,
        related_name='season_settings',
    )
    mult_low = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal('-10.00'),
        help_text="Low season % change from base"
    )
    mult_mid = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Mid season % change from base"
    )
    mult_high = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal('15.00'),
        help_text="High season % change from base"
    )
    round_to_rm5 = models.BooleanField(
        default=False,
        help_text="Round computed prices to the nearest 5"
    )

    class Meta:
        verbose_name = "Season Settings"
        verbose_name_plural = "Season Settings"

    def __str__(self):
        return f"{self.resort}: low {self.mult_low}% / mid {self.mult_mid}% / high {self.mult_high}%"


class SeasonRange(models.Model):
    """A labelled date range; saving one through set_season_range fans out to SeasonAssignment rows."""
    resort = models.ForeignKey(
        Resort,
        on_delete=models.CASCADE,
        related_name='season_ranges',
    )
    date_start = models.DateField()
    date_end = models.DateField()
    season = models.CharField(max_length=10, choices=SEASON_CHOICES)
    description = models.CharField(max_length=200, blank=True, default='')

    class Meta:
        ordering = ['resort', 'date_start']
        verbose_name = "Season Range"
        verbose_name_plural = "Season Ranges"

    def __str__(self):
        return f"{self.get_season_display()} ({self.date_start} - {self.date_end})"

    def clean(self):
        if self.date_end and self.date_start and self.date_end < self.date_start:
            raise ValidationError({'date_end': 'End date cannot be before start date.'})

    def get_all_dates(self):
        """Generator yielding all dates in this range."""
        current = self.date_start
        while current <= self.date_end:
            yield current
            current += timedelta(days=1)


class SeasonAssignment(models.Model):
    """Season label for one calendar date. Dates without a row are mid season."""
    resort = models.ForeignKey(
        Resort,
        on_delete=models.CASCADE,
        related_name='season_assignments',
    )
    date = models.DateField()
    season = models.CharField(max_length=10, choices=SEASON_CHOICES, default=SEASON_MID)
    description = models.CharField(max_length=200, blank=True, default='')

    class Meta:
        ordering = ['resort', 'date']
        verbose_name = "Season Assignment"
        verbose_name_plural = "Season Assignments"
        constraints = [
            models.UniqueConstraint(fields=['resort', 'date'], name='unique_season_assignment'),
        ]

    def __str__(self):
        return f"{self.date}: {self.season}"
