from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from board_core.config import BoardConfig
from board_core.exceptions import ConfigurationError


class JeopardyAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "jeopardy_app"

    def ready(self):
        """
        Called when Django starts up. Refuse to start with a board
        configuration that can never produce a board.
        """
        try:
            BoardConfig.from_settings(settings).validate()
        except ConfigurationError as e:
            raise ImproperlyConfigured(f"Invalid JEOPARDY_* settings: {e}") from e
