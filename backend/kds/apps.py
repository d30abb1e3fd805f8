from django.apps import AppConfig


class KdsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'kds'
    verbose_name = 'Kitchen Display'

    def ready(self):
        from .events.bus import OrderEventBus

        # Single process-wide bus shared by the order services and event stream
        self.event_bus = OrderEventBus()


def get_event_bus():
    from django.apps import apps

    return apps.get_app_config('kds').event_bus
