import logging
from datetime import timedelta

from django_prometheus.models import ExportModelOperationsMixin

from django.db import models
from django.utils import timezone

logger = logging.getLogger(__name__)


class BoardSession(ExportModelOperationsMixin("boardsession"), models.Model):
    """
    The board of one browser session, stored by Django session key.

    The board is kept in its serialized form (see Board.to_dict); a new game
    replaces it wholesale. `version` goes up with every write.
    """

    session_key = models.CharField(max_length=40, primary_key=True, help_text="Django session key as primary identifier")
    board = models.JSONField(null=True, blank=True, help_text="Serialized board, including hidden clue text")
    build_token = models.CharField(max_length=32, null=True, blank=True, help_text="Token of the build in flight, if any")
    version = models.PositiveIntegerField(default=0, help_text="Incremented on every write")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["updated_at"], name="jeopardy_board_updated_idx"),
        ]

    def __str__(self):
        board_id = self.board.get("board_id") if self.board else None
        return f"{self.session_key} - board {board_id}"

    @classmethod
    def stale(cls, max_age: timedelta):
        """Boards that have not been touched for longer than max_age."""
        return cls.objects.filter(updated_at__lt=timezone.now() - max_age)

    @classmethod
    def prune(cls, max_age: timedelta) -> int:
        """
        Delete boards that have not been touched for longer than max_age.

        Returns:
            Number of deleted boards
        """
        deleted, _ = cls.stale(max_age).delete()
        if deleted:
            logger.info(f"Pruned {deleted} boards older than {max_age}")
        return deleted
