from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.notifications"
    verbose_name = "Notifications"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .handlers import EVENT_HANDLERS

        message_bus.register_event_handlers(EVENT_HANDLERS)
