import json
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from board_core.exceptions import DataSourceError

from jeopardy_app.tests.fakes import make_candidates, make_category_payload


@patch('jeopardy_app.BoardBuilder.get_category', side_effect=make_category_payload)
@patch('jeopardy_app.BoardBuilder.get_categories', return_value=make_candidates(100))
class TestBuildBoardCommand(TestCase):
    def call(self, *args):
        out = StringIO()
        call_command('build_board', *args, stdout=out)
        return out.getvalue()

    def test_prints_table_of_placeholders(self, mock_get_categories, mock_get_category):
        output = self.call('--seed', '1')

        lines = output.splitlines()
        self.assertEqual(lines[0], "Loading board...")
        self.assertIn("category", lines[1])
        # Header, separator and five rows of placeholders
        self.assertEqual(sum(1 for line in lines if line.strip().startswith("?")), 5)
        self.assertIn("6 categories x 5 clues", output)

    def test_json_with_custom_shape(self, mock_get_categories, mock_get_category):
        output = self.call('--json', '--categories', '3', '--questions', '2', '--seed', '4')

        board = json.loads(output)
        self.assertEqual(board['category_count'], 3)
        self.assertEqual(board['questions_per_category'], 2)
        self.assertTrue(all(clue['text'] is None for category in board['categories'] for clue in category['clues']))

    def test_reveal_all(self, mock_get_categories, mock_get_category):
        output = self.call('--json', '--reveal-all', '--categories', '2', '--questions', '2', '--parallel')

        board = json.loads(output)
        for category in board['categories']:
            for clue in category['clues']:
                self.assertEqual(clue['showing'], 'answer')
                self.assertTrue(clue['text'].startswith('answer '))

    def test_reveal_all_table_shows_answers(self, mock_get_categories, mock_get_category):
        output = self.call('--reveal-all', '--categories', '1', '--questions', '1')
        self.assertIn("answer ", output)
        self.assertNotIn("?", output.split("\n", 3)[-1])

    def test_same_seed_same_board(self, mock_get_categories, mock_get_category):
        first = json.loads(self.call('--json', '--seed', '12'))
        second = json.loads(self.call('--json', '--seed', '12'))
        self.assertEqual(first['titles'], second['titles'])

    def test_invalid_shape(self, mock_get_categories, mock_get_category):
        with self.assertRaises(CommandError):
            self.call('--categories', '0')

    def test_data_source_failure(self, mock_get_categories, mock_get_category):
        mock_get_category.side_effect = DataSourceError("timeout")
        with self.assertRaises(CommandError):
            self.call()
