"""
Booking-time adjustments: Promotion, Surcharge, Tax.
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.db import models

from .core import Resort, RoomType, SEASON_CHOICES

TARGET_SEASON_ANY = 'any'
TARGET_SEASON_CHOICES = [(TARGET_SEASON_ANY, 'Any')] + SEASON_CHOICES

weekday_mask_validator = RegexValidator(
    r'^[1-7]*$',
    "Weekday mask may only contain digits 1 (Mon) to 7 (Sun)."
)


class StayAdjustment(models.Model):
    """
    Shared eligibility fields for promotions and surcharges.

    An adjustment applies to a stay night when the night falls inside
    [date_start, date_end], the night's season matches target_season (or it
    is 'any'), the optional room type / package code match, and the night's
    ISO weekday digit appears in weekday_mask (blank mask = every day).
    """
    APPLIES_ALL = 'all'
    APPLIES_PACKAGE = 'package'
    APPLIES_ROOM_TYPE = 'room_type'
    APPLIES_TO_CHOICES = [
        (APPLIES_ALL, 'All bookings'),
        (APPLIES_PACKAGE, 'Specific package'),
        (APPLIES_ROOM_TYPE, 'Specific room type'),
    ]

    name = models.CharField(max_length=100)
    date_start = models.DateField()
    date_end = models.DateField()
    target_season = models.CharField(
        max_length=10,
        choices=TARGET_SEASON_CHOICES,
        default=TARGET_SEASON_ANY,
    )
    applies_to = models.CharField(
        max_length=20,
        choices=APPLIES_TO_CHOICES,
        default=APPLIES_ALL,
    )
    package_code = models.CharField(max_length=10, blank=True, default='')
    weekday_mask = models.CharField(
        max_length=7,
        blank=True,
        default='',
        validators=[weekday_mask_validator],
        help_text="ISO weekday digits, e.g. '67' for Sat+Sun. Blank = every day."
    )
    notes = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)

    class Meta:
        abstract = True
        ordering = ['date_start', 'id']

    def __str__(self):
        status = "" if self.is_active else " [INACTIVE]"
        return f"{self.name} ({self.date_start} - {self.date_end}){status}"

    def clean(self):
        if self.date_end and self.date_start and self.date_end < self.date_start:
            raise ValidationError({'date_end': 'End date cannot be before start date.'})
        if self.applies_to == self.APPLIES_ROOM_TYPE and not self.room_type_id:
            raise ValidationError({'room_type': 'Choose the room type this applies to.'})
        if self.applies_to == self.APPLIES_PACKAGE and not self.package_code:
            raise ValidationError({'package_code': 'Choose the package this applies to.'})


class Promotion(StayAdjustment):
    """Percentage discount, compounded night by night."""
    resort = models.ForeignKey(Resort, on_delete=models.CASCADE, related_name='promotions')
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='promotions',
    )
    percent_off = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    min_days_in_advance = models.PositiveIntegerField(
        default=0,
        help_text="Booking must be made at least this many days before the stay night (0 = no limit)"
    )

    class Meta(StayAdjustment.Meta):
        verbose_name = "Promotion"
        verbose_name_plural = "Promotions"


class Surcharge(StayAdjustment):
    """
    Flat amount per pax per matching night.

    apply_to_adults / apply_to_children are stored for the admin screens but
    the engine always charges adults + children.
    """
    resort = models.ForeignKey(Resort, on_delete=models.CASCADE, related_name='surcharges')
    room_type = models.ForeignKey(
        RoomType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='surcharges',
    )
    amount_per_pax = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
    )
    apply_to_adults = models.BooleanField(default=True)
    apply_to_children = models.BooleanField(default=True)

    class Meta(StayAdjustment.Meta):
        verbose_name = "Surcharge"
        verbose_name_plural = "Surcharges"


class Tax(models.Model):
    """Tax line. Prices are tax-inclusive; taxes are backed out for display."""
    PER_TOTAL = 'per_total'
    PER_ROOM = 'per_room'
    PER_PAX = 'per_pax'
    PER_NIGHT = 'per_night'
    APPLICATION_TYPE_CHOICES = [
        (PER_TOTAL, 'Per booking total'),
        (PER_ROOM, 'Per room'),
        (PER_PAX, 'Per pax'),
        (PER_NIGHT, 'Per night'),
    ]

    resort = models.ForeignKey(Resort, on_delete=models.CASCADE, related_name='taxes')
    name = models.CharField(max_length=100)
    rate = models.DecimalField(max_digits=10, decimal_places=2)
    application_type = models.CharField(
        max_length=20,
        choices=APPLICATION_TYPE_CHOICES,
        default=PER_TOTAL,
    )
    is_percentage = models.BooleanField(default=True)
    apply_to_adults = models.BooleanField(default=True)
    apply_to_children = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['resort', 'display_order', 'id']
        verbose_name = "Tax"
        verbose_name_plural = "Taxes"

    def __str__(self):
        suffix = '%' if self.is_percentage else ''
        return f"{self.name} ({self.rate}{suffix} {self.get_application_type_display().lower()})"
