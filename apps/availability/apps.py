from django.apps import AppConfig


class AvailabilityConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.availability"
    verbose_name = "Availability"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .application.block_handlers import build_block_handlers

        message_bus.register_command_handlers(build_block_handlers())
