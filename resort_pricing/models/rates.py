"""
Rate models: AnnualBaseRate, SeasonalRate, RateOverride, RateRestriction.

Two base-rate representations coexist:
    AnnualBaseRate  - one cost/price per room per year, seasons applied as
                      percentage multipliers (read by the rate resolver and
                      the package matrix)
    SeasonalRate    - explicit low/mid/high cost/price per room per year
                      (read and written by the bulk seasonal editor only)
They are not reconciled with each other.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .core import Resort, RoomType, SEASON_CHOICES


class AnnualBaseRate(models.Model):
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='annual_base_rates',
    )
    year = models.PositiveIntegerField()
    cost_base_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
    )
    price_base_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
    )

    class Meta:
        ordering = ['room_type', '-year']
        verbose_name = "Annual Base Rate"
        verbose_name_plural = "Annual Base Rates"
        constraints = [
            models.UniqueConstraint(fields=['room_type', 'year'], name='unique_annual_base_rate'),
        ]

    def __str__(self):
        return f"{self.room_type} {self.year}: {self.cost_base_per_night}/{self.price_base_per_night}"


class SeasonalRate(models.Model):
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='seasonal_rates',
    )
    season = models.CharField(max_length=10, choices=SEASON_CHOICES)
    year = models.PositiveIntegerField()
    cost_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
    )
    price_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
    )

    class Meta:
        ordering = ['room_type', 'year', 'season']
        verbose_name = "Seasonal Rate"
        verbose_name_plural = "Seasonal Rates"
        constraints = [
            models.UniqueConstraint(
                fields=['room_type', 'season', 'year'],
                name='unique_seasonal_rate',
            ),
        ]

    def __str__(self):
        return f"{self.room_type} {self.year} {self.season}: {self.cost_per_night}/{self.price_per_night}"


class RateOverride(models.Model):
    """
    Manual adjustment of one room type's seasonal price on one date.

    Types:
        set            - price becomes `value`
        delta_amount   - price = season price + value
        delta_percent  - price = season price × (1 + value/100)
    """
    SET = 'set'
    DELTA_AMOUNT = 'delta_amount'
    DELTA_PERCENT = 'delta_percent'

    OVERRIDE_TYPE_CHOICES = [
        (SET, 'Set price'),
        (DELTA_AMOUNT, 'Adjust by amount'),
        (DELTA_PERCENT, 'Adjust by percent'),
    ]

    resort = models.ForeignKey(
        Resort,
        on_delete=models.CASCADE,
        related_name='rate_overrides',
    )
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='rate_overrides',
    )
    date = models.DateField()
    override_type = models.CharField(max_length=20, choices=OVERRIDE_TYPE_CHOICES)
    value = models.DecimalField(max_digits=10, decimal_places=2)
    note = models.CharField(max_length=255, blank=True, default='')
    created_by = models.CharField(max_length=150, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['resort', 'date', 'room_type']
        verbose_name = "Rate Override"
        verbose_name_plural = "Rate Overrides"
        constraints = [
            models.UniqueConstraint(
                fields=['resort', 'room_type', 'date'],
                name='unique_rate_override',
            ),
        ]

    def __str__(self):
        return f"{self.room_type} {self.date}: {self.get_adjustment_display()}"

    def clean(self):
        valid_types = {choice for choice, _ in self.OVERRIDE_TYPE_CHOICES}
        if self.override_type not in valid_types:
            raise ValidationError({
                'override_type': f"Override type must be one of: {', '.join(sorted(valid_types))}"
            })

    def get_adjustment_display(self):
        """Display formatted adjustment."""
        if self.override_type == self.SET:
            return f"= {self.value}"
        sign = '+' if self.value >= 0 else ''
        if self.override_type == self.DELTA_AMOUNT:
            return f"{sign}{self.value}"
        return f"{sign}{self.value}%"


class RateRestriction(models.Model):
    """Booking constraints for one room type on one date."""
    EDITABLE_FIELDS = (
        'is_closed', 'close_to_arrival', 'close_to_departure',
        'min_los', 'max_los', 'min_advance_days', 'max_advance_days', 'notes',
    )

    resort = models.ForeignKey(
        Resort,
        on_delete=models.CASCADE,
        related_name='rate_restrictions',
    )
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        related_name='rate_restrictions',
    )
    date = models.DateField()
    is_closed = models.BooleanField(default=False)
    close_to_arrival = models.BooleanField(default=False)
    close_to_departure = models.BooleanField(default=False)
    min_los = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    max_los = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    min_advance_days = models.PositiveIntegerField(null=True, blank=True)
    max_advance_days = models.PositiveIntegerField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['resort', 'date', 'room_type']
        verbose_name = "Rate Restriction"
        verbose_name_plural = "Rate Restrictions"
        constraints = [
            models.UniqueConstraint(
                fields=['resort', 'room_type', 'date'],
                name='unique_rate_restriction',
            ),
        ]

    def __str__(self):
        flags = []
        if self.is_closed:
            flags.append('closed')
        if self.close_to_arrival:
            flags.append('CTA')
        if self.close_to_departure:
            flags.append('CTD')
        return f"{self.room_type} {self.date}: {', '.join(flags) or 'open'}"

    def clean(self):
        if self.min_los and self.max_los and self.max_los < self.min_los:
            raise ValidationError({'max_los': 'Maximum stay cannot be below minimum stay.'})

    def as_dict(self):
        return {
            'is_closed': self.is_closed,
            'close_to_arrival': self.close_to_arrival,
            'close_to_departure': self.close_to_departure,
            'min_los': self.min_los,
            'max_los': self.max_los,
            'min_advance_days': self.min_advance_days,
            'max_advance_days': self.max_advance_days,
            'notes': self.notes or None,
        }
