from django.apps import AppConfig


class NetworkConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'network'
    verbose_name = 'ProConnect Network'

    def ready(self):
        # Keeps post engagement scores and new-account profiles in sync
        from . import signals  # noqa: F401
