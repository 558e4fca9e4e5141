from enum import Enum
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
import uuid

from .exceptions import OutOfRangeError


class RevealState(Enum):
    """How much of a clue is currently shown."""

    HIDDEN = "hidden"
    QUESTION = "question"
    ANSWER = "answer"


@dataclass
class Clue:
    """
    One question/answer pair with its reveal state.
    """

    question: str
    answer: str
    showing: RevealState = RevealState.HIDDEN

    @property
    def visible_text(self) -> Optional[str]:
        """Text currently shown in the clue's cell, or None while hidden."""
        if self.showing is RevealState.QUESTION:
            return self.question
        if self.showing is RevealState.ANSWER:
            return self.answer
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'question': self.question,
            'answer': self.answer,
            'showing': self.showing.value,
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary that only contains text the player may see."""
        return {
            'showing': self.showing.value,
            'text': self.visible_text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Clue':
        """Create from dictionary."""
        return cls(
            question=data.get('question', ''),
            answer=data.get('answer', ''),
            showing=RevealState(data.get('showing') or RevealState.HIDDEN.value),
        )


@dataclass
class Category:
    """
    A titled column of clues.
    """

    title: str
    clues: List[Clue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'title': self.title,
            'clues': [clue.to_dict() for clue in self.clues],
        }

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'clues': [clue.to_public_dict() for clue in self.clues],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        """Create from dictionary."""
        return cls(
            title=data.get('title', ''),
            clues=[Clue.from_dict(clue_data) for clue_data in data.get('clues', [])],
        )


@dataclass
class Board:
    """
    The full grid of categories for one game.

    Clues are addressed by (category_index, clue_index).
    """

    categories: List[Category] = field(default_factory=list)
    board_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def titles(self) -> List[str]:
        return [category.title for category in self.categories]

    @property
    def category_count(self) -> int:
        return len(self.categories)

    @property
    def questions_per_category(self) -> int:
        if not self.categories:
            return 0
        return len(self.categories[0].clues)

    @property
    def cell_count(self) -> int:
        return sum(len(category.clues) for category in self.categories)

    def get_clue(self, coordinate: 'CellCoordinate') -> Clue:
        """
        Get the clue at a coordinate.

        Raises:
            OutOfRangeError: If the coordinate is not on this board
        """
        coordinate.validate(self)
        return self.categories[coordinate.category_index].clues[coordinate.clue_index]

    def iter_cells(self):
        """Yield (coordinate, clue) for every cell, category by category."""
        for category_index, category in enumerate(self.categories):
            for clue_index, clue in enumerate(category.clues):
                yield CellCoordinate(category_index, clue_index), clue

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            'board_id': self.board_id,
            'categories': [category.to_dict() for category in self.categories],
        }

    def to_public_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary without any hidden question or answer text."""
        return {
            'board_id': self.board_id,
            'titles': self.titles,
            'category_count': self.category_count,
            'questions_per_category': self.questions_per_category,
            'categories': [category.to_public_dict() for category in self.categories],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Board':
        """Create from dictionary."""
        board = cls(categories=[Category.from_dict(category_data) for category_data in data.get('categories', [])])
        if data.get('board_id'):
            board.board_id = data['board_id']
        return board


@dataclass(frozen=True)
class CellCoordinate:
    """
    Validated address of one clue on the board.
    """

    category_index: int
    clue_index: int

    def __post_init__(self):
        for name in ('category_index', 'clue_index'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise OutOfRangeError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise OutOfRangeError(f"{name} must not be negative, got {value}")

    @property
    def cell_key(self) -> str:
        return f"{self.category_index}_{self.clue_index}"

    @classmethod
    def from_values(cls, category_index: Any, clue_index: Any) -> 'CellCoordinate':
        """
        Build a coordinate from raw UI values such as form fields or data attributes.

        Raises:
            OutOfRangeError: If either value is not a non-negative integer
        """
        try:
            return cls(int(str(category_index).strip()), int(str(clue_index).strip()))
        except ValueError:
            raise OutOfRangeError(f"Invalid cell coordinate: {category_index!r}, {clue_index!r}")

    @classmethod
    def from_cell_key(cls, cell_key: str) -> 'CellCoordinate':
        """
        Parse a cell key (e.g., "0_1") into a coordinate.

        Raises:
            OutOfRangeError: If the key is malformed
        """
        parts = str(cell_key).split('_')
        if len(parts) != 2:
            raise OutOfRangeError(f"Invalid cell key: {cell_key!r}")
        return cls.from_values(parts[0], parts[1])

    def validate(self, board: Board) -> 'CellCoordinate':
        """
        Check that this coordinate addresses a clue on the board.

        Raises:
            OutOfRangeError: If the coordinate is outside the board
        """
        if self.category_index >= len(board.categories):
            raise OutOfRangeError(
                f"Category index {self.category_index} out of range for board with {len(board.categories)} categories"
            )
        clues = board.categories[self.category_index].clues
        if self.clue_index >= len(clues):
            raise OutOfRangeError(
                f"Clue index {self.clue_index} out of range for category with {len(clues)} clues"
            )
        return self
