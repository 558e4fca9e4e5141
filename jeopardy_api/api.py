import logging
from typing import Optional, Union

from django.http import JsonResponse
from ninja import NinjaAPI, Schema

from board_core.controller import BoardGameController
from board_core.exceptions import (
    BoardCoreException,
    BuildCancelledError,
    DataSourceError,
    GameStateError,
    InsufficientDataError,
    OutOfRangeError,
)
from board_core.models import CellCoordinate

from jeopardy_app.BoardBuilder import BoardBuilder, get_board_config
from jeopardy_app.GameSession import GameSession
from jeopardy_app.metrics import record_clue_reveal, track_request_latency
from jeopardy_app.renderers import JsonBoardRenderer
from jeopardy_app.tracing import add_span_attribute, trace_operation
from jeopardy_app.trivia_api_wrapper import get_trivia_api_status

logger = logging.getLogger(__name__)

api = NinjaAPI(title="Jeopardy Board API")

LOAD_FAILED_MESSAGE = "Couldn't load the board, try again."

# Checked in order, subclasses first
ERROR_STATUS_CODES = [
    (DataSourceError, 502),
    (InsufficientDataError, 503),
    (OutOfRangeError, 400),
    (BuildCancelledError, 409),
    (GameStateError, 409),
]


def error_response(error: BoardCoreException) -> JsonResponse:
    """Translate a board error into the JSON error payload."""
    status = 500
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_class):
            status = status_code
            break

    if isinstance(error, (DataSourceError, InsufficientDataError)):
        message = LOAD_FAILED_MESSAGE
    else:
        message = str(error)
    return JsonResponse({"status": "error", "error_type": type(error).__name__, "message": message}, status=status)


class RevealSchema(Schema):
    category: Union[int, str]
    clue: Union[int, str]
    board_id: Optional[str] = None


@api.post("/board/new")
def new_board(request):
    """Build a new board for this browser and replace the current one."""
    timer_stop = track_request_latency("new_board")
    status = "success"
    try:
        session = GameSession.for_request(request)
        controller = BoardGameController(session, BoardBuilder(), JsonBoardRenderer())
        with trace_operation("api.new_board", session_key=session.session_key):
            try:
                board = controller.start()
            except BuildCancelledError as e:
                status = "cancelled"
                logger.info(f"Board build for session {session.session_key} was superseded")
                return error_response(e)
            except GameStateError as e:
                status = "busy"
                logger.warning(f"Could not replace the board of session {session.session_key}: {e}")
                return error_response(e)
            except (DataSourceError, InsufficientDataError) as e:
                status = "error"
                logger.error(f"Failed to build board for session {session.session_key}: {e}")
                return error_response(e)

        add_span_attribute("board.id", board.board_id)
        return {
            "status": "success",
            "board_id": board.board_id,
            "titles": board.titles,
            "category_count": board.category_count,
            "questions_per_category": board.questions_per_category,
            "cell_count": board.cell_count,
        }
    finally:
        timer_stop(status=status)


@api.get("/board")
def get_board(request):
    """Get the public state of the current board."""
    timer_stop = track_request_latency("get_board")
    try:
        session = GameSession.for_request(request)
        if not session.has_board:
            return JsonResponse({"status": "error", "message": "No board has been loaded"}, status=404)
        return {"status": "success", **session.board.to_public_dict()}
    finally:
        timer_stop()


@api.post("/board/reveal")
def reveal_clue(request, data: RevealSchema):
    """Reveal the next part of one clue."""
    timer_stop = track_request_latency("reveal_clue")
    status = "success"
    try:
        try:
            coordinate = CellCoordinate.from_values(data.category, data.clue)
            session = GameSession.for_request(request)
            renderer = JsonBoardRenderer()
            controller = BoardGameController(session, None, renderer)
            with trace_operation("api.reveal_clue", cell=coordinate.cell_key):
                result = controller.reveal(coordinate, board_id=data.board_id)
        except (OutOfRangeError, GameStateError) as e:
            status = "error"
            logger.warning(f"Rejected reveal of ({data.category}, {data.clue}): {e}")
            return error_response(e)

        record_clue_reveal(result.showing.value, result.changed)
        return {"status": "success", **result.to_dict(), "updates": renderer.updates}
    finally:
        timer_stop(status=status)


@api.get("/health")
def health(request):
    """Liveness check with the trivia API wrapper status."""
    return {
        "status": "ok",
        "board": get_board_config().to_dict(),
        "trivia_api": get_trivia_api_status(),
    }
