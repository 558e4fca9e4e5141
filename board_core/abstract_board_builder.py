from abc import abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional
import logging
import random

from .config import BoardConfig
from .exceptions import BuildCancelledError, DataSourceError, InsufficientDataError
from .models import Board, Category, Clue

logger = logging.getLogger(__name__)


class BaseBoardBuilder:
    """
    Abstract base class for board builders.

    This provides the common logic for turning a trivia data source into a board:
    pick random categories, sample clues from each of them and assemble the grid.
    Subclasses provide the data source.
    """

    def __init__(self, config: Optional[BoardConfig] = None, random_seed: Optional[int] = None):
        """
        Initialize the board builder.

        Args:
            config: Board shape and fetch settings
            random_seed: Random seed for deterministic behavior, None for a random board
        """
        self.config = (config or BoardConfig()).validate()
        self.random_seed = random_seed
        self.rng = random.Random(random_seed)

    @abstractmethod
    def fetch_category_candidates(self, count: int) -> List[Dict[str, Any]]:
        """
        Get a pool of candidate categories from the data source.

        Args:
            count: Number of candidates to request

        Returns:
            List of category dictionaries, each carrying at least an 'id'

        Raises:
            DataSourceError: If the request fails
        """
        pass

    @abstractmethod
    def fetch_category(self, category_id: Any) -> Dict[str, Any]:
        """
        Get a category with its full clue list from the data source.

        Args:
            category_id: Identifier of the category

        Returns:
            Dictionary with 'title' and a 'clues' list of {question, answer, ...}

        Raises:
            DataSourceError: If the request fails
        """
        pass

    def normalize_text(self, text: Any) -> str:
        """
        Clean up a title, question or answer coming from the data source.
        """
        if text is None:
            return ''
        return str(text).strip()

    def sample(self, items: List[Any], count: int, what: str, rng: Optional[random.Random] = None) -> List[Any]:
        """
        Pick `count` items uniformly at random without replacement.

        Raises:
            InsufficientDataError: If there are fewer than `count` items
        """
        if len(items) < count:
            raise InsufficientDataError(f"Need {count} {what}, but only {len(items)} are available")
        return (rng or self.rng).sample(items, count)

    def select_category_ids(self) -> List[Any]:
        """
        Pick the categories for a new board.

        Returns:
            List of `category_count` distinct category ids

        Raises:
            DataSourceError: If the candidate list is missing or malformed
            InsufficientDataError: If there are fewer candidates than needed
        """
        candidates = self.fetch_category_candidates(self.config.candidate_pool_size)
        if not isinstance(candidates, list) or not candidates:
            raise DataSourceError("Category list is empty or malformed")

        category_ids = []
        seen = set()
        for candidate in candidates:
            if not isinstance(candidate, dict):
                continue
            category_id = candidate.get('id')
            if category_id is None or category_id in seen:
                continue
            seen.add(category_id)
            category_ids.append(category_id)

        if not category_ids:
            raise DataSourceError("Category list does not contain any category ids")

        logger.debug(f"Selecting {self.config.category_count} of {len(category_ids)} candidate categories")
        return self.sample(category_ids, self.config.category_count, "categories")

    def get_usable_clues(self, raw_clues: List[Any]) -> List[Clue]:
        """
        Turn raw clue dictionaries into hidden clues, dropping blank and duplicate ones.
        """
        clues = []
        seen = set()
        for raw_clue in raw_clues:
            if not isinstance(raw_clue, dict):
                continue
            question = self.normalize_text(raw_clue.get('question'))
            answer = self.normalize_text(raw_clue.get('answer'))
            if not question or not answer:
                continue

            identity = raw_clue.get('id')
            if identity is None:
                identity = (question, answer)
            if identity in seen:
                continue
            seen.add(identity)
            clues.append(Clue(question=question, answer=answer))
        return clues

    def load_category(self, category_id: Any, rng: Optional[random.Random] = None) -> Category:
        """
        Fetch one category and sample its clues.

        Args:
            category_id: Identifier of the category
            rng: Random generator to sample with, defaults to the builder's

        Returns:
            Category with exactly `questions_per_category` hidden clues

        Raises:
            DataSourceError: If the category payload is missing or malformed
            InsufficientDataError: If the category has too few usable clues
        """
        data = self.fetch_category(category_id)
        if not isinstance(data, dict):
            raise DataSourceError(f"Category {category_id} payload is malformed")

        raw_clues = data.get('clues')
        if not isinstance(raw_clues, list):
            raise DataSourceError(f"Category {category_id} payload has no clue list")

        title = self.normalize_text(data.get('title'))
        if not title:
            raise DataSourceError(f"Category {category_id} payload has no title")

        usable_clues = self.get_usable_clues(raw_clues)
        clues = self.sample(
            usable_clues, self.config.questions_per_category, f"clues in category {category_id}", rng=rng
        )
        logger.debug(f"Loaded category {category_id} ({title}): {len(clues)} of {len(usable_clues)} clues")
        return Category(title=title, clues=clues)

    def build_board(self, cancel_check: Optional[Callable[[], bool]] = None) -> Board:
        """
        Build a complete new board.

        Either every category loads or the build fails as a whole; a partial
        board is never returned.

        Args:
            cancel_check: Callable returning True once this build has been superseded

        Returns:
            A fully populated board

        Raises:
            DataSourceError: If any request fails
            InsufficientDataError: If any category or the category list is too small
            BuildCancelledError: If cancel_check reports the build was superseded
        """
        category_ids = self.select_category_ids()
        self._check_cancelled(cancel_check)

        if self.config.parallel_fetch and len(category_ids) > 1:
            categories = self._load_categories_parallel(category_ids, cancel_check)
        else:
            categories = []
            for category_id in category_ids:
                categories.append(self.load_category(category_id))
                self._check_cancelled(cancel_check)

        board = Board(categories=categories)
        logger.info(f"Built board {board.board_id} from categories {category_ids}")
        return board

    def _load_categories_parallel(self, category_ids: List[Any], cancel_check: Optional[Callable[[], bool]]) -> List[Category]:
        """
        Load categories concurrently, keeping the selection order.
        """
        # One generator per category keeps sampling deterministic for a given seed
        rngs = [random.Random(self.rng.random()) for _ in category_ids]
        max_workers = min(self.config.max_fetch_workers, len(category_ids))

        executor = ThreadPoolExecutor(max_workers=max_workers)
        futures = [
            executor.submit(self.load_category, category_id, rng)
            for category_id, rng in zip(category_ids, rngs)
        ]
        try:
            for future in as_completed(futures):
                future.result()
                self._check_cancelled(cancel_check)
            return [future.result() for future in futures]
        except Exception:
            for future in futures:
                future.cancel()
            raise
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _check_cancelled(self, cancel_check: Optional[Callable[[], bool]]):
        if cancel_check is not None and cancel_check():
            raise BuildCancelledError("Board build was superseded by a newer game")
