from typing import Optional
import logging

from .abstract_board_builder import BaseBoardBuilder
from .abstract_game_state import BaseGameSession, RevealResult
from .abstract_renderer import BaseBoardRenderer
from .exceptions import ConfigurationError
from .models import Board, CellCoordinate

logger = logging.getLogger(__name__)


class BoardGameController:
    """
    Connects a game session, a board builder and a renderer.

    A controller that only handles reveals can be created without a builder.
    """

    def __init__(self, session: BaseGameSession, builder: Optional[BaseBoardBuilder], renderer: BaseBoardRenderer):
        self.session = session
        self.builder = builder
        self.renderer = renderer
        self.renderer.on_cell_activated(self.handle_cell_activated)

    def start(self) -> Board:
        """
        Start or restart a game: build a new board and paint it.

        The previous board stays in place if the build fails.

        Returns:
            The published board
        """
        if self.builder is None:
            raise ConfigurationError("A board builder is required to start a game")
        token = self.session.begin_build()
        self.renderer.show_loading()
        try:
            board = self.builder.build_board(cancel_check=lambda: not self.session.is_current_build(token))
            self.session.publish_board(board, token)
            self.renderer.render_board(board.titles, board.cell_count)
            return board
        finally:
            self.renderer.hide_loading()

    def reveal(self, coordinate: CellCoordinate, board_id: Optional[str] = None) -> RevealResult:
        """
        Reveal the next part of a clue and redraw only its cell.
        """
        result = self.session.handle_reveal(coordinate, board_id=board_id)
        if result.changed:
            self.renderer.update_cell(coordinate.category_index, coordinate.clue_index, result.text)
        return result

    def handle_cell_activated(self, category_index: int, clue_index: int):
        """Click handler registered with the renderer."""
        self.reveal(CellCoordinate.from_values(category_index, clue_index))
