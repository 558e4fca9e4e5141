from abc import abstractmethod
from contextlib import contextmanager
from typing import Dict, Any, Optional, Tuple
from dataclasses import dataclass
import logging
import threading
import uuid

from .exceptions import BuildCancelledError, GameStateError, StaleBoardError
from .models import Board, CellCoordinate, Clue, RevealState

logger = logging.getLogger(__name__)


@dataclass
class RevealResult:
    """
    Outcome of a click on a clue cell.

    `changed` is False when the clue was already showing its answer; `text` is
    None in that case and nothing needs to be redrawn.
    """

    coordinate: CellCoordinate
    text: Optional[str]
    showing: RevealState
    changed: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'category': self.coordinate.category_index,
            'clue': self.coordinate.clue_index,
            'text': self.text,
            'showing': self.showing.value,
            'changed': self.changed,
        }


def reveal_clue(clue: Clue) -> Tuple[Optional[str], bool]:
    """
    Advance a clue one step through Hidden -> Question -> Answer.

    Args:
        clue: The clue to advance, mutated in place

    Returns:
        Tuple of (text to display or None, whether the clue changed)
    """
    if clue.showing is RevealState.HIDDEN:
        clue.showing = RevealState.QUESTION
        return clue.question, True
    elif clue.showing is RevealState.QUESTION:
        clue.showing = RevealState.ANSWER
        return clue.answer, True
    elif clue.showing is RevealState.ANSWER:
        return None, False
    raise GameStateError(f"Unknown reveal state: {clue.showing!r}")


class BaseGameSession:
    """
    Abstract base class for the owner of one player's board.

    The session is the only place a board is replaced or a clue is mutated.
    Subclasses decide where the state lives and how access is serialised.
    """

    def __init__(self, board: Optional[Board] = None, build_token: Optional[str] = None):
        self.board: Optional[Board] = board
        self.build_token: Optional[str] = build_token

    @abstractmethod
    def save(self):
        """
        Persist the board and build token.
        """
        pass

    def refresh(self):
        """
        Reload the board and build token from storage.

        Storage-backed sessions override this so a lock holder sees writes
        made by other requests.
        """
        pass

    @contextmanager
    def lock(self):
        """
        Serialise board replacement and clue mutation.
        """
        yield self

    def current_build_token(self) -> Optional[str]:
        """
        Get the token of the most recently started build.
        """
        return self.build_token

    @property
    def has_board(self) -> bool:
        return self.board is not None

    def begin_build(self) -> str:
        """
        Start a new build, superseding any build that is still in flight.

        Returns:
            The token the new build must present when publishing
        """
        with self.lock():
            self.build_token = uuid.uuid4().hex
            self.save()
        logger.debug(f"Started board build {self.build_token}")
        return self.build_token

    def is_current_build(self, token: Optional[str]) -> bool:
        """
        Check whether a build is still the latest one for this session.
        """
        return token is not None and token == self.current_build_token()

    def publish_board(self, board: Board, token: Optional[str] = None) -> Board:
        """
        Replace the current board with a freshly built one.

        Args:
            board: The complete new board
            token: Token from begin_build(), or None to publish unconditionally

        Returns:
            The published board

        Raises:
            BuildCancelledError: If a newer build was started in the meantime
        """
        with self.lock():
            if token is not None and token != self.build_token:
                logger.info(f"Discarding board {board.board_id}: build {token} was superseded by {self.build_token}")
                raise BuildCancelledError("A newer game was started while this board was loading")
            self.board = board
            self.build_token = None
            self.save()
        logger.info(f"Published board {board.board_id} with {board.category_count} categories")
        return board

    def handle_reveal(self, coordinate: CellCoordinate, board_id: Optional[str] = None) -> RevealResult:
        """
        Handle a click on a clue cell.

        Args:
            coordinate: The clicked cell
            board_id: The board the click was made on, if the caller knows it

        Returns:
            RevealResult describing what the cell should now show

        Raises:
            GameStateError: If there is no board
            StaleBoardError: If board_id does not match the current board
            OutOfRangeError: If the coordinate is not on the board
        """
        with self.lock():
            if self.board is None:
                raise GameStateError("No board has been loaded")
            if board_id is not None and board_id != self.board.board_id:
                raise StaleBoardError(f"Board {board_id} has been replaced by {self.board.board_id}")

            clue = self.board.get_clue(coordinate)
            text, changed = reveal_clue(clue)
            if changed:
                self.save()

        return RevealResult(coordinate=coordinate, text=text, showing=clue.showing, changed=changed)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the session state to a dictionary for serialization.
        """
        return {
            'board': self.board.to_dict() if self.board is not None else None,
            'build_token': self.build_token,
        }

    def from_dict(self, data: Dict[str, Any]) -> 'BaseGameSession':
        """
        Load session state from a dictionary.

        Returns:
            Self for chaining
        """
        board_data = data.get('board')
        self.board = Board.from_dict(board_data) if board_data else None
        self.build_token = data.get('build_token')
        return self


class InMemoryGameSession(BaseGameSession):
    """
    Game session held in process memory, guarded by a mutex.

    Used by the management command and anywhere a board is played without a
    Django session behind it.
    """

    def __init__(self, board: Optional[Board] = None, build_token: Optional[str] = None):
        super().__init__(board, build_token)
        self._lock = threading.RLock()

    def save(self):
        pass

    @contextmanager
    def lock(self):
        with self._lock:
            yield self
