import time

from prometheus_client import Counter, Histogram

# Board building
board_builds_counter = Counter("jeopardy_board_builds_total", "Number of board builds", ["result"])  # 'success', 'data_error', 'insufficient', 'cancelled'

board_build_duration_histogram = Histogram(
    "jeopardy_board_build_duration_seconds",
    "Time taken to build a board",
    ["result"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30, 60),
)

category_fetches_counter = Counter("jeopardy_category_fetches_total", "Number of categories fetched for boards", ["result"])

# Clue reveals
clue_reveals_counter = Counter("jeopardy_clue_reveals_total", "Number of clue cell clicks", ["showing", "changed"])

# Trivia API
trivia_api_calls_counter = Counter("jeopardy_trivia_api_calls_total", "Number of trivia API calls", ["endpoint", "result"])

trivia_api_cache_counter = Counter("jeopardy_trivia_api_cache_total", "Trivia API cache lookups", ["result"])  # 'hit', 'miss'

# API request latency
api_request_latency = Histogram("jeopardy_api_request_latency_seconds", "API request latency in seconds", ["endpoint"])

# API request counter
api_request_counter = Counter("jeopardy_api_requests_total", "Number of API requests", ["endpoint", "status"])


# Helper function to track API request latency
def track_request_latency(endpoint):
    start_time = time.time()

    def stop_timer(status="success"):
        latency = time.time() - start_time
        api_request_latency.labels(endpoint=endpoint).observe(latency)
        api_request_counter.labels(endpoint=endpoint, status=status).inc()

    return stop_timer


def record_board_build(result, duration_seconds):
    board_builds_counter.labels(result=result).inc()
    board_build_duration_histogram.labels(result=result).observe(duration_seconds)


def record_category_fetch(result="success"):
    category_fetches_counter.labels(result=result).inc()


def record_clue_reveal(showing, changed):
    """
    Record a click on a clue cell.

    Args:
        showing (str): Reveal state after the click
        changed (bool): False when the click hit an already answered clue
    """
    clue_reveals_counter.labels(showing=showing, changed=str(bool(changed)).lower()).inc()


def record_trivia_api_call(endpoint, result):
    trivia_api_calls_counter.labels(endpoint=endpoint, result=result).inc()


def record_trivia_api_cache(hit):
    trivia_api_cache_counter.labels(result="hit" if hit else "miss").inc()
