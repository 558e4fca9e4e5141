import logging
import time
from contextlib import contextmanager
from typing import Optional

from django.conf import settings
from django.core.cache import caches
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from board_core.abstract_game_state import BaseGameSession
from board_core.exceptions import GameStateError
from board_core.models import Board

from jeopardy_app.models import BoardSession

logger = logging.getLogger(__name__)


class GameSession(BaseGameSession):
    """
    Game session backed by the database, one per Django session.

    Every read inside the lock goes back to the database, so concurrent
    requests of the same browser see each other's writes. Writes only go
    through if the row is still at the version that was read, so a request
    holding outdated state can never overwrite a newer board.
    """

    LOCK_POLL_INTERVAL = 0.05

    def __init__(self, session_key: str, lock_timeout: Optional[float] = None, lock_cache: Optional[str] = None):
        super().__init__()
        self.session_key = session_key
        self.lock_timeout = settings.JEOPARDY_SESSION_LOCK_TIMEOUT if lock_timeout is None else lock_timeout
        self.lock_cache = caches[lock_cache or settings.JEOPARDY_LOCK_CACHE]
        self.version: Optional[int] = None
        self.refresh()

    @classmethod
    def for_request(cls, request) -> 'GameSession':
        """
        Get the game session of the requesting browser, creating a session key if needed.
        """
        if request.session.session_key is None:
            request.session.save()
        return cls(request.session.session_key)

    @property
    def lock_key(self) -> str:
        return f"jeopardy_session_lock:{self.session_key}"

    def _load(self) -> Optional[BoardSession]:
        return BoardSession.objects.filter(session_key=self.session_key).first()

    def refresh(self):
        stored = self._load()
        if stored is None:
            self.board = None
            self.build_token = None
            self.version = None
            return
        self.board = Board.from_dict(stored.board) if stored.board else None
        self.build_token = stored.build_token
        self.version = stored.version

    def save(self):
        """
        Write the board and build token back.

        Raises:
            GameStateError: If another request changed the stored board since it was read
        """
        fields = {
            'board': self.board.to_dict() if self.board is not None else None,
            'build_token': self.build_token,
        }

        if self.version is None:
            try:
                with transaction.atomic():
                    BoardSession.objects.create(session_key=self.session_key, version=1, **fields)
            except IntegrityError:
                logger.warning(f"Board of session {self.session_key} was created by another request")
                raise GameStateError("The board was changed by another request, try again.")
            self.version = 1
            return

        updated = BoardSession.objects.filter(session_key=self.session_key, version=self.version).update(
            version=F('version') + 1, updated_at=timezone.now(), **fields
        )
        if not updated:
            logger.warning(f"Board of session {self.session_key} changed since version {self.version} was read")
            raise GameStateError("The board was changed by another request, try again.")
        self.version += 1

    def current_build_token(self) -> Optional[str]:
        stored = self._load()
        return stored.build_token if stored is not None else None

    @contextmanager
    def lock(self):
        """
        Hold the per-session lock and work on freshly loaded state.

        The lock lives in the lock cache, which has to be shared by all worker
        processes for the lock to hold across them.

        Raises:
            GameStateError: If the lock could not be acquired in time
        """
        deadline = time.monotonic() + self.lock_timeout
        # The cache entry expires on its own if a holder dies
        while not self.lock_cache.add(self.lock_key, True, timeout=max(int(self.lock_timeout), 1) * 2):
            if time.monotonic() >= deadline:
                logger.warning(f"Timed out waiting for the board lock of session {self.session_key}")
                raise GameStateError("The board is busy, try again.")
            time.sleep(self.LOCK_POLL_INTERVAL)
        try:
            self.refresh()
            yield self
        finally:
            self.lock_cache.delete(self.lock_key)
