import logging
from typing import Any, Dict, List

from board_core.abstract_renderer import BaseBoardRenderer

logger = logging.getLogger(__name__)


class JsonBoardRenderer(BaseBoardRenderer):
    """
    Records render operations so an API response can replay them in the browser.
    """

    def __init__(self):
        super().__init__()
        self.operations: List[Dict[str, Any]] = []

    def render_board(self, titles: List[str], cell_count: int):
        self.operations.append({'op': 'render_board', 'titles': list(titles), 'cell_count': cell_count})

    def update_cell(self, category_index: int, clue_index: int, text: str):
        self.operations.append({'op': 'update_cell', 'category': category_index, 'clue': clue_index, 'text': text})

    def show_loading(self):
        self.operations.append({'op': 'show_loading'})

    def hide_loading(self):
        self.operations.append({'op': 'hide_loading'})

    @property
    def updates(self) -> List[Dict[str, Any]]:
        """Only the cell updates, in the order they happened."""
        return [op for op in self.operations if op['op'] == 'update_cell']


class ConsoleBoardRenderer(BaseBoardRenderer):
    """
    Draws the board as a text table, used by the build_board command.
    """

    def __init__(self, stdout, column_width: int = 24):
        super().__init__()
        self.stdout = stdout
        self.column_width = column_width
        self.titles: List[str] = []
        self.cells: Dict[tuple, str] = {}
        self.rows = 0

    def render_board(self, titles: List[str], cell_count: int):
        self.titles = list(titles)
        self.rows = cell_count // len(self.titles) if self.titles else 0
        self.cells = {
            (category_index, clue_index): self.PLACEHOLDER
            for category_index in range(len(self.titles))
            for clue_index in range(self.rows)
        }

    def update_cell(self, category_index: int, clue_index: int, text: str):
        self.cells[(category_index, clue_index)] = text

    def show_loading(self):
        self.stdout.write("Loading board...")

    def hide_loading(self):
        pass

    def _fit(self, text: str) -> str:
        text = " ".join(str(text).split())
        if len(text) > self.column_width:
            text = text[: self.column_width - 3] + "..."
        return text.ljust(self.column_width)

    def format_table(self) -> str:
        separator = "-+-".join("-" * self.column_width for _ in self.titles)
        lines = [" | ".join(self._fit(title) for title in self.titles), separator]
        for clue_index in range(self.rows):
            lines.append(
                " | ".join(self._fit(self.cells[(category_index, clue_index)]) for category_index in range(len(self.titles)))
            )
        return "\n".join(lines)

    def draw(self):
        self.stdout.write(self.format_table())
