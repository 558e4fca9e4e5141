import json
import logging
from dataclasses import replace

from django.core.management.base import BaseCommand, CommandError

from board_core.abstract_game_state import InMemoryGameSession
from board_core.controller import BoardGameController
from board_core.exceptions import BoardCoreException, ConfigurationError

from jeopardy_app.BoardBuilder import BoardBuilder, get_board_config
from jeopardy_app.renderers import ConsoleBoardRenderer, JsonBoardRenderer

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Build a board from the trivia API and print it'

    def add_arguments(self, parser):
        parser.add_argument('--categories', type=int, help='Number of categories (default from settings)')
        parser.add_argument('--questions', type=int, help='Number of questions per category (default from settings)')
        parser.add_argument('--seed', type=int, help='Random seed for a reproducible board')
        parser.add_argument('--parallel', action='store_true', help='Fetch categories concurrently')
        parser.add_argument('--json', action='store_true', help='Print the board as JSON instead of a table')
        parser.add_argument(
            '--reveal-all',
            action='store_true',
            help='Click every cell through to its answer before printing',
        )

    def get_config(self, options):
        config = get_board_config()
        overrides = {}
        if options.get('categories') is not None:
            overrides['category_count'] = options['categories']
        if options.get('questions') is not None:
            overrides['questions_per_category'] = options['questions']
        if options.get('parallel'):
            overrides['parallel_fetch'] = True
        try:
            return replace(config, **overrides).validate()
        except ConfigurationError as e:
            raise CommandError(f"Invalid board configuration: {e}")

    def handle(self, *args, **options):
        config = self.get_config(options)
        as_json = options.get('json', False)

        renderer = JsonBoardRenderer() if as_json else ConsoleBoardRenderer(self.stdout)
        session = InMemoryGameSession()
        controller = BoardGameController(session, BoardBuilder(config, random_seed=options.get('seed')), renderer)

        try:
            board = controller.start()
        except BoardCoreException as e:
            logger.error(f"Failed to build board: {e}")
            raise CommandError(f"Couldn't load the board: {e}")

        if options.get('reveal_all'):
            for coordinate, _clue in board.iter_cells():
                # Hidden -> Question -> Answer
                renderer.activate_cell(coordinate.category_index, coordinate.clue_index)
                renderer.activate_cell(coordinate.category_index, coordinate.clue_index)

        if as_json:
            self.stdout.write(json.dumps(session.board.to_public_dict(), indent=2))
            return

        renderer.draw()
        self.stdout.write(
            self.style.SUCCESS(
                f"Built board {board.board_id}: {board.category_count} categories x {board.questions_per_category} clues"
            )
        )
