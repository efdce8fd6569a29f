"""
Signal handlers that create a resort's pricing singletons and default
package switches.
"""

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Resort, SeasonSettings, PricingConfig, PackageConfig, PACKAGE_NAMES

# includes_* flags per canonical variant: breakfast, lunch, dinner, boat, 3 islands
DEFAULT_PACKAGE_INCLUDES = {
    'RB': (True, False, False, True, False),
    'RBB': (True, False, False, True, False),
    'RB3I': (True, False, False, True, True),
    'FB': (True, True, True, True, False),
    'FB3I': (True, True, True, True, True),
}


@receiver(post_save, sender=Resort)
def create_resort_pricing_defaults(sender, instance, created, **kwargs):
    """
    When a resort is created, create its SeasonSettings and PricingConfig
    rows and one PackageConfig per canonical package variant.
    """
    if not created:
        return

    SeasonSettings.objects.get_or_create(resort=instance)
    PricingConfig.objects.get_or_create(resort=instance)

    for sort_order, (code, name) in enumerate(PACKAGE_NAMES.items(), start=1):
        breakfast, lunch, dinner, boat, activities = DEFAULT_PACKAGE_INCLUDES[code]
        PackageConfig.objects.get_or_create(
            resort=instance,
            package_code=code,
            defaults={
                'package_name': name,
                'includes_breakfast': breakfast,
                'includes_lunch': lunch,
                'includes_dinner': dinner,
                'includes_boat': boat,
                'includes_activities_3i': activities,
                'sort_order': sort_order,
            }
        )
