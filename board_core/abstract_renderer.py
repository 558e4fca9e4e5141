from abc import abstractmethod
from typing import Callable, List, Optional


CellHandler = Callable[[int, int], None]


class BaseBoardRenderer:
    """
    Abstract base class for whatever paints the board.

    Cells start out as placeholders; afterwards only single cells are updated.
    """

    PLACEHOLDER = "?"

    def __init__(self):
        self.cell_handler: Optional[CellHandler] = None

    @abstractmethod
    def render_board(self, titles: List[str], cell_count: int):
        """
        Paint the category headers and `cell_count` placeholder cells.

        Args:
            titles: Category titles, one per column
            cell_count: Total number of clue cells on the board
        """
        pass

    @abstractmethod
    def update_cell(self, category_index: int, clue_index: int, text: str):
        """
        Replace the content of one cell.
        """
        pass

    @abstractmethod
    def show_loading(self):
        pass

    @abstractmethod
    def hide_loading(self):
        pass

    def on_cell_activated(self, handler: CellHandler):
        """
        Register the callback that receives (category_index, clue_index) for each click.
        """
        self.cell_handler = handler

    def activate_cell(self, category_index: int, clue_index: int):
        """
        Route a click on a cell to the registered handler.
        """
        if self.cell_handler is not None:
            self.cell_handler(category_index, clue_index)
