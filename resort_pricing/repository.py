"""
PricingRepository: Django ORM access for the pricing services, scoped to one
resort.

Read methods return None or an empty list for absent records and never
raise for missing data. Write methods upsert on each entity's natural key
with update_or_create and let database errors propagate to the caller.
"""

from resort_pricing.models import (
    RoomType,
    SeasonSettings,
    SeasonRange,
    SeasonAssignment,
    AnnualBaseRate,
    SeasonalRate,
    RateOverride,
    RateRestriction,
    MealPlan,
    Activity,
    PricingConfig,
    PackageConfig,
    Promotion,
    Surcharge,
    Tax,
)


class PricingRepository:

    def __init__(self, resort):
        self.resort = resort

    # =========================================================================
    # ROOM TYPES & BASE RATES
    # =========================================================================

    def fetch_room_types(self, active_only=True):
        room_types = RoomType.objects.filter(resort=self.resort)
        if active_only:
            room_types = room_types.filter(is_active=True)
        return list(room_types.order_by('order_index', 'name'))

    def fetch_annual_base_rate(self, room_type_id, year):
        return AnnualBaseRate.objects.filter(room_type_id=room_type_id, year=year).first()

    def fetch_latest_annual_base_rate(self, room_type_id, before_year=None):
        """Most recent rate for the room type, optionally limited to years before `before_year`."""
        rates = AnnualBaseRate.objects.filter(room_type_id=room_type_id)
        if before_year is not None:
            rates = rates.filter(year__lt=before_year)
        return rates.order_by('-year').first()

    def fetch_annual_base_rates(self, room_type_ids, year):
        return list(AnnualBaseRate.objects.filter(room_type_id__in=room_type_ids, year=year))

    def fetch_seasonal_rate(self, room_type_id, season, year):
        return SeasonalRate.objects.filter(
            room_type_id=room_type_id,
            season=season,
            year=year
        ).first()

    def fetch_seasonal_rates(self, room_type_ids, year):
        return list(SeasonalRate.objects.filter(room_type_id__in=room_type_ids, year=year))

    # =========================================================================
    # SEASONS
    # =========================================================================

    def fetch_season_settings(self):
        return SeasonSettings.objects.filter(resort=self.resort).first()

    def fetch_season_assignment(self, stay_date):
        return SeasonAssignment.objects.filter(resort=self.resort, date=stay_date).first()

    def fetch_season_assignments(self, start_date, end_date):
        return list(SeasonAssignment.objects.filter(
            resort=self.resort,
            date__gte=start_date,
            date__lte=end_date
        ).order_by('date'))

    # =========================================================================
    # OVERRIDES & RESTRICTIONS
    # =========================================================================

    def fetch_override(self, room_type_id, stay_date):
        return RateOverride.objects.filter(
            resort=self.resort,
            room_type_id=room_type_id,
            date=stay_date
        ).first()

    def fetch_overrides(self, room_type_ids, start_date, end_date):
        return list(RateOverride.objects.filter(
            resort=self.resort,
            room_type_id__in=room_type_ids,
            date__gte=start_date,
            date__lte=end_date
        ))

    def fetch_restriction(self, room_type_id, stay_date):
        return RateRestriction.objects.filter(
            resort=self.resort,
            room_type_id=room_type_id,
            date=stay_date
        ).first()

    def fetch_restrictions(self, room_type_ids, start_date, end_date):
        return list(RateRestriction.objects.filter(
            resort=self.resort,
            room_type_id__in=room_type_ids,
            date__gte=start_date,
            date__lte=end_date
        ))

    # =========================================================================
    # PROMOTIONS, SURCHARGES, TAXES
    # =========================================================================

    def fetch_active_promotions(self, start_date, end_date):
        """Active promotions whose window overlaps [start_date, end_date]."""
        return list(Promotion.objects.filter(
            resort=self.resort,
            is_active=True,
            date_start__lte=end_date,
            date_end__gte=start_date
        ).order_by('date_start', 'id'))

    def fetch_active_surcharges(self, start_date, end_date):
        """Active surcharges whose window overlaps [start_date, end_date]."""
        return list(Surcharge.objects.filter(
            resort=self.resort,
            is_active=True,
            date_start__lte=end_date,
            date_end__gte=start_date
        ).order_by('date_start', 'id'))

    def fetch_taxes(self, active_only=True):
        taxes = Tax.objects.filter(resort=self.resort)
        if active_only:
            taxes = taxes.filter(is_active=True)
        return list(taxes.order_by('display_order', 'id'))

    # =========================================================================
    # PACKAGE INPUTS
    # =========================================================================

    def fetch_meal_plans(self, active_only=False):
        meals = MealPlan.objects.filter(resort=self.resort)
        if active_only:
            meals = meals.filter(is_active=True)
        return list(meals.order_by('code'))

    def fetch_activities(self, active_only=False):
        activities = Activity.objects.filter(resort=self.resort)
        if active_only:
            activities = activities.filter(is_active=True)
        return list(activities.order_by('code'))

    def fetch_pricing_config(self):
        return PricingConfig.objects.filter(resort=self.resort).first()

    def fetch_package_configs(self, active_only=True):
        configs = PackageConfig.objects.filter(resort=self.resort)
        if active_only:
            configs = configs.filter(is_active=True)
        return list(configs.order_by('sort_order', 'package_code'))

    # =========================================================================
    # WRITES
    # =========================================================================

    def upsert_annual_base_rate(self, room_type_id, year, cost, price):
        return AnnualBaseRate.objects.update_or_create(
            room_type_id=room_type_id,
            year=year,
            defaults={
                'cost_base_per_night': cost,
                'price_base_per_night': price,
            }
        )

    def upsert_seasonal_rate(self, room_type_id, season, year, cost_per_night, price_per_night):
        return SeasonalRate.objects.update_or_create(
            room_type_id=room_type_id,
            season=season,
            year=year,
            defaults={
                'cost_per_night': cost_per_night,
                'price_per_night': price_per_night,
            }
        )

    def upsert_override(self, room_type_id, stay_date, override_type, value, note='', created_by=''):
        override = RateOverride.objects.filter(
            resort=self.resort,
            room_type_id=room_type_id,
            date=stay_date
        ).first()
        created = override is None
        if created:
            override = RateOverride(
                resort=self.resort,
                room_type_id=room_type_id,
                date=stay_date,
                created_by=created_by or '',
            )
        override.override_type = override_type
        override.value = value
        override.note = note or ''
        override.full_clean(exclude=['resort', 'room_type'])
        override.save()
        return override, created

    def delete_override(self, room_type_id, stay_date):
        deleted, _ = RateOverride.objects.filter(
            resort=self.resort,
            room_type_id=room_type_id,
            date=stay_date
        ).delete()
        return deleted

    def upsert_restriction(self, room_type_id, stay_date, restrictions):
        unknown = set(restrictions) - set(RateRestriction.EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown restriction field(s): {', '.join(sorted(unknown))}")

        restriction = RateRestriction.objects.filter(
            resort=self.resort,
            room_type_id=room_type_id,
            date=stay_date
        ).first()
        created = restriction is None
        if created:
            restriction = RateRestriction(resort=self.resort, room_type_id=room_type_id, date=stay_date)
        for field, value in restrictions.items():
            if field == 'notes':
                value = value or ''
            setattr(restriction, field, value)
        restriction.full_clean(exclude=['resort', 'room_type'])
        restriction.save()
        return restriction, created

    def delete_restriction(self, room_type_id, stay_date):
        deleted, _ = RateRestriction.objects.filter(
            resort=self.resort,
            room_type_id=room_type_id,
            date=stay_date
        ).delete()
        return deleted

    def upsert_meal_plan(self, code, values):
        return MealPlan.objects.update_or_create(
            resort=self.resort,
            code=code,
            defaults=values,
        )

    def upsert_activity(self, code, values):
        return Activity.objects.update_or_create(
            resort=self.resort,
            code=code,
            defaults=values,
        )

    def upsert_season_assignment(self, stay_date, season, description=''):
        return SeasonAssignment.objects.update_or_create(
            resort=self.resort,
            date=stay_date,
            defaults={
                'season': season,
                'description': description or '',
            }
        )

    def create_season_range(self, date_start, date_end, season, description=''):
        season_range = SeasonRange(
            resort=self.resort,
            date_start=date_start,
            date_end=date_end,
            season=season,
            description=description or '',
        )
        season_range.full_clean(exclude=['resort'])
        season_range.save()
        return season_range
