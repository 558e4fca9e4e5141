import logging

from django.shortcuts import render
from django.http import HttpResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from jeopardy_app.auth import basic_auth_required
from jeopardy_app.BoardBuilder import get_board_config
from jeopardy_app.GameSession import GameSession
from jeopardy_app.metrics import track_request_latency
from jeopardy_app.tracing import trace_operation, trace_view

logger = logging.getLogger(__name__)


@trace_operation("views.board_rows")
def board_rows(public_board):
    """
    Transpose the public board into table rows, one per clue index.

    Each cell is a dict with category, clue, showing and text.
    """
    rows = []
    for clue_index in range(public_board["questions_per_category"]):
        row = []
        for category_index, category in enumerate(public_board["categories"]):
            clue = category["clues"][clue_index]
            row.append({"category": category_index, "clue": clue_index, **clue})
        rows.append(row)
    return rows


@trace_view("index")
def index(request):
    """Render the game page with the board of this browser, if there is one."""
    timer_stop = track_request_latency("index")
    try:
        session = GameSession.for_request(request)
        config = get_board_config()
        context = {
            "board": None,
            "rows": [],
            "category_count": config.category_count,
            "questions_per_category": config.questions_per_category,
        }
        if session.has_board:
            public_board = session.board.to_public_dict()
            context["board"] = public_board
            context["rows"] = board_rows(public_board)
        else:
            logger.debug(f"No board for session {session.session_key}, the page will start a game")
        return render(request, "jeopardy_app/game.html", context)
    finally:
        timer_stop()


@basic_auth_required
def metrics_view(request):
    """Expose the application metrics."""
    timer_stop = track_request_latency("metrics")
    try:
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
    finally:
        timer_stop()
