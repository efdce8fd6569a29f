from django.apps import AppConfig


class ResortPricingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'resort_pricing'
    verbose_name = 'Resort Pricing Engine'

    def ready(self):
        """Import signals when app is ready."""
        import resort_pricing.signals  # noqa
