import logging
import time
from typing import Any, Callable, Dict, List, Optional

from django.conf import settings
from django.utils.html import strip_tags

from board_core.abstract_board_builder import BaseBoardBuilder
from board_core.config import BoardConfig
from board_core.exceptions import BuildCancelledError, DataSourceError, InsufficientDataError
from board_core.models import Board, Category

from jeopardy_app.metrics import record_board_build, record_category_fetch
from jeopardy_app.tracing import add_span_attribute, trace_operation
from jeopardy_app.trivia_api_wrapper import get_categories, get_category

logger = logging.getLogger(__name__)


def get_board_config() -> BoardConfig:
    """Board configuration from the Django settings, validated."""
    return BoardConfig.from_settings(settings).validate()


class BoardBuilder(BaseBoardBuilder):
    """
    Builds boards from the public trivia API.
    """

    def __init__(self, config: Optional[BoardConfig] = None, random_seed: Optional[int] = None):
        super().__init__(config or get_board_config(), random_seed)

    def fetch_category_candidates(self, count: int) -> List[Dict[str, Any]]:
        return get_categories(count)

    def fetch_category(self, category_id: Any) -> Dict[str, Any]:
        return get_category(category_id)

    def normalize_text(self, text: Any) -> str:
        # The trivia service embeds markup such as <i>...</i> in clue text
        return strip_tags(super().normalize_text(text)).strip()

    def load_category(self, category_id: Any, rng=None) -> Category:
        with trace_operation("board.load_category", category_id=str(category_id)) as span:
            try:
                category = super().load_category(category_id, rng)
            except (DataSourceError, InsufficientDataError) as e:
                record_category_fetch(result=type(e).__name__)
                raise
            record_category_fetch()
            span.set_attribute("category.title", category.title)
            return category

    def build_board(self, cancel_check: Optional[Callable[[], bool]] = None) -> Board:
        start_time = time.time()
        with trace_operation(
            "board.build",
            category_count=self.config.category_count,
            questions_per_category=self.config.questions_per_category,
            parallel_fetch=self.config.parallel_fetch,
        ):
            try:
                board = super().build_board(cancel_check)
            except DataSourceError:
                record_board_build("data_error", time.time() - start_time)
                raise
            except InsufficientDataError:
                record_board_build("insufficient", time.time() - start_time)
                raise
            except BuildCancelledError:
                record_board_build("cancelled", time.time() - start_time)
                raise

            record_board_build("success", time.time() - start_time)
            add_span_attribute("board.id", board.board_id)
            return board
