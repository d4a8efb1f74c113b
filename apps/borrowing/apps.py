from django.apps import AppConfig


class BorrowingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.borrowing"
    verbose_name = "Borrowing"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .application.command_handlers import build_command_handlers

        message_bus.register_command_handlers(build_command_handlers())
