from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


SEASON_CHOICES = [('low', 'Low'), ('mid', 'Mid'), ('high', 'High')]
TARGET_SEASON_CHOICES = [('any', 'Any'), ('low', 'Low'), ('mid', 'Mid'), ('high', 'High')]
APPLIES_TO_CHOICES = [
    ('all', 'All bookings'),
    ('package', 'Specific package'),
    ('room_type', 'Specific room type'),
]


def money(**kwargs):
    return models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, **kwargs)


def weekday_mask():
    return models.CharField(
        blank=True,
        default='',
        help_text="ISO weekday digits, e.g. '67' for Sat+Sun. Blank = every day.",
        max_length=7,
        validators=[django.core.validators.RegexValidator(
            '^[1-7]*$', 'Weekday mask may only contain digits 1 (Mon) to 7 (Sun).'
        )],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Resort',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Resort name', max_length=200)),
                ('code', models.SlugField(help_text="URL-friendly code (e.g., 'pulau-resort')", unique=True)),
                ('currency_symbol', models.CharField(default='RM', help_text='Currency symbol for display', max_length=5)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Resort',
                'verbose_name_plural': 'Resorts',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='RoomType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='e.g., Sea View, Pool View', max_length=100)),
                ('code', models.CharField(blank=True, default='', max_length=20)),
                ('order_index', models.PositiveIntegerField(default=0, help_text='Display order')),
                ('is_active', models.BooleanField(default=True)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='room_types', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Room Type',
                'verbose_name_plural': 'Room Types',
                'ordering': ['resort', 'order_index', 'name'],
                'constraints': [models.UniqueConstraint(fields=('resort', 'name'), name='unique_room_type_name')],
            },
        ),
        migrations.CreateModel(
            name='SeasonSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('mult_low', models.DecimalField(decimal_places=2, default=Decimal('-10.00'), help_text='Low season % change from base', max_digits=6)),
                ('mult_mid', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Mid season % change from base', max_digits=6)),
                ('mult_high', models.DecimalField(decimal_places=2, default=Decimal('15.00'), help_text='High season % change from base', max_digits=6)),
                ('round_to_rm5', models.BooleanField(default=False, help_text='Round computed prices to the nearest 5')),
                ('resort', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='season_settings', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Season Settings',
                'verbose_name_plural': 'Season Settings',
            },
        ),
        migrations.CreateModel(
            name='SeasonRange',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date_start', models.DateField()),
                ('date_end', models.DateField()),
                ('season', models.CharField(choices=SEASON_CHOICES, max_length=10)),
                ('description', models.CharField(blank=True, default='', max_length=200)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='season_ranges', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Season Range',
                'verbose_name_plural': 'Season Ranges',
                'ordering': ['resort', 'date_start'],
            },
        ),
        migrations.CreateModel(
            name='SeasonAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('season', models.CharField(choices=SEASON_CHOICES, default='mid', max_length=10)),
                ('description', models.CharField(blank=True, default='', max_length=200)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='season_assignments', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Season Assignment',
                'verbose_name_plural': 'Season Assignments',
                'ordering': ['resort', 'date'],
                'constraints': [models.UniqueConstraint(fields=('resort', 'date'), name='unique_season_assignment')],
            },
        ),
        migrations.CreateModel(
            name='AnnualBaseRate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('year', models.PositiveIntegerField()),
                ('cost_base_per_night', money()),
                ('price_base_per_night', money()),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='annual_base_rates', to='resort_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Annual Base Rate',
                'verbose_name_plural': 'Annual Base Rates',
                'ordering': ['room_type', '-year'],
                'constraints': [models.UniqueConstraint(fields=('room_type', 'year'), name='unique_annual_base_rate')],
            },
        ),
        migrations.CreateModel(
            name='SeasonalRate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('season', models.CharField(choices=SEASON_CHOICES, max_length=10)),
                ('year', models.PositiveIntegerField()),
                ('cost_per_night', money()),
                ('price_per_night', money()),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='seasonal_rates', to='resort_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Seasonal Rate',
                'verbose_name_plural': 'Seasonal Rates',
                'ordering': ['room_type', 'year', 'season'],
                'constraints': [models.UniqueConstraint(fields=('room_type', 'season', 'year'), name='unique_seasonal_rate')],
            },
        ),
        migrations.CreateModel(
            name='RateOverride',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('override_type', models.CharField(choices=[('set', 'Set price'), ('delta_amount', 'Adjust by amount'), ('delta_percent', 'Adjust by percent')], max_length=20)),
                ('value', models.DecimalField(decimal_places=2, max_digits=10)),
                ('note', models.CharField(blank=True, default='', max_length=255)),
                ('created_by', models.CharField(blank=True, default='', max_length=150)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rate_overrides', to='resort_pricing.resort')),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rate_overrides', to='resort_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Rate Override',
                'verbose_name_plural': 'Rate Overrides',
                'ordering': ['resort', 'date', 'room_type'],
                'constraints': [models.UniqueConstraint(fields=('resort', 'room_type', 'date'), name='unique_rate_override')],
            },
        ),
        migrations.CreateModel(
            name='RateRestriction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('is_closed', models.BooleanField(default=False)),
                ('close_to_arrival', models.BooleanField(default=False)),
                ('close_to_departure', models.BooleanField(default=False)),
                ('min_los', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('max_los', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('min_advance_days', models.PositiveIntegerField(blank=True, null=True)),
                ('max_advance_days', models.PositiveIntegerField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rate_restrictions', to='resort_pricing.resort')),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rate_restrictions', to='resort_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Rate Restriction',
                'verbose_name_plural': 'Rate Restrictions',
                'ordering': ['resort', 'date', 'room_type'],
                'constraints': [models.UniqueConstraint(fields=('resort', 'room_type', 'date'), name='unique_rate_restriction')],
            },
        ),
        migrations.CreateModel(
            name='MealPlan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=10)),
                ('name', models.CharField(blank=True, default='', max_length=100)),
                ('cost_adult', money()),
                ('cost_child', money()),
                ('price_adult', money()),
                ('price_child', money()),
                ('is_active', models.BooleanField(default=True)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meal_plans', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Meal Plan',
                'verbose_name_plural': 'Meal Plans',
                'ordering': ['resort', 'code'],
                'constraints': [models.UniqueConstraint(fields=('resort', 'code'), name='unique_meal_plan_code')],
            },
        ),
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=20)),
                ('name', models.CharField(blank=True, default='', max_length=100)),
                ('cost_trip_resort', money(help_text='Trip cost when the resort runs it')),
                ('cost_trip_vendor', money(help_text='Trip cost when a vendor runs it')),
                ('cost_adult', money()),
                ('cost_child', money()),
                ('price_adult', money()),
                ('price_child', money()),
                ('default_cost_source', models.CharField(choices=[('resort', 'Resort-operated'), ('vendor', 'Vendor-operated')], default='resort', max_length=10)),
                ('is_active', models.BooleanField(default=True)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Activity',
                'verbose_name_plural': 'Activities',
                'ordering': ['resort', 'code'],
                'constraints': [models.UniqueConstraint(fields=('resort', 'code'), name='unique_activity_code')],
            },
        ),
        migrations.CreateModel(
            name='PricingConfig',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('boat_cost_return_trip', money()),
                ('price_boat_adult', money()),
                ('price_boat_child', money()),
                ('activities_3i_cost_trip', money(help_text='3-island trip cost, once per booking')),
                ('cost_activities_3i', money(help_text='3-island variable cost per pax')),
                ('price_activities_3i', money(help_text='3-island price per pax')),
                ('addons', models.JSONField(blank=True, default=dict)),
                ('profit_margin_pct', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=6)),
                ('resort', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='pricing_config', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Pricing Config',
                'verbose_name_plural': 'Pricing Configs',
            },
        ),
        migrations.CreateModel(
            name='PackageConfig',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('package_code', models.CharField(max_length=10)),
                ('package_name', models.CharField(blank=True, default='', max_length=100)),
                ('includes_room', models.BooleanField(default=True)),
                ('includes_breakfast', models.BooleanField(default=False)),
                ('includes_lunch', models.BooleanField(default=False)),
                ('includes_dinner', models.BooleanField(default=False)),
                ('includes_boat', models.BooleanField(default=False)),
                ('includes_activities_3i', models.BooleanField(default=False)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='package_configs', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Package Config',
                'verbose_name_plural': 'Package Configs',
                'ordering': ['resort', 'sort_order', 'package_code'],
                'constraints': [models.UniqueConstraint(fields=('resort', 'package_code'), name='unique_package_code')],
            },
        ),
        migrations.CreateModel(
            name='Promotion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('date_start', models.DateField()),
                ('date_end', models.DateField()),
                ('target_season', models.CharField(choices=TARGET_SEASON_CHOICES, default='any', max_length=10)),
                ('applies_to', models.CharField(choices=APPLIES_TO_CHOICES, default='all', max_length=20)),
                ('package_code', models.CharField(blank=True, default='', max_length=10)),
                ('weekday_mask', weekday_mask()),
                ('notes', models.TextField(blank=True, default='')),
                ('is_active', models.BooleanField(default=True)),
                ('percent_off', models.DecimalField(decimal_places=2, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('min_days_in_advance', models.PositiveIntegerField(default=0, help_text='Booking must be made at least this many days before the stay night (0 = no limit)')),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='promotions', to='resort_pricing.resort')),
                ('room_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='promotions', to='resort_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Promotion',
                'verbose_name_plural': 'Promotions',
                'ordering': ['date_start', 'id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Surcharge',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('date_start', models.DateField()),
                ('date_end', models.DateField()),
                ('target_season', models.CharField(choices=TARGET_SEASON_CHOICES, default='any', max_length=10)),
                ('applies_to', models.CharField(choices=APPLIES_TO_CHOICES, default='all', max_length=20)),
                ('package_code', models.CharField(blank=True, default='', max_length=10)),
                ('weekday_mask', weekday_mask()),
                ('notes', models.TextField(blank=True, default='')),
                ('is_active', models.BooleanField(default=True)),
                ('amount_per_pax', money()),
                ('apply_to_adults', models.BooleanField(default=True)),
                ('apply_to_children', models.BooleanField(default=True)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='surcharges', to='resort_pricing.resort')),
                ('room_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='surcharges', to='resort_pricing.roomtype')),
            ],
            options={
                'verbose_name': 'Surcharge',
                'verbose_name_plural': 'Surcharges',
                'ordering': ['date_start', 'id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Tax',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('rate', models.DecimalField(decimal_places=2, max_digits=10)),
                ('application_type', models.CharField(choices=[('per_total', 'Per booking total'), ('per_room', 'Per room'), ('per_pax', 'Per pax'), ('per_night', 'Per night')], default='per_total', max_length=20)),
                ('is_percentage', models.BooleanField(default=True)),
                ('apply_to_adults', models.BooleanField(default=True)),
                ('apply_to_children', models.BooleanField(default=False)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('resort', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='taxes', to='resort_pricing.resort')),
            ],
            options={
                'verbose_name': 'Tax',
                'verbose_name_plural': 'Taxes',
                'ordering': ['resort', 'display_order', 'id'],
            },
        ),
    ]
