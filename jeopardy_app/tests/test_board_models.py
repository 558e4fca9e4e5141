from django.test import SimpleTestCase

from board_core.config import BoardConfig
from board_core.exceptions import ConfigurationError, OutOfRangeError
from board_core.models import Board, Category, CellCoordinate, Clue, RevealState


def make_board(category_count=2, questions_per_category=2):
    return Board(
        categories=[
            Category(
                title=f"title {c}",
                clues=[Clue(question=f"q{c}{n}", answer=f"a{c}{n}") for n in range(questions_per_category)],
            )
            for c in range(category_count)
        ]
    )


class TestBoardModels(SimpleTestCase):
    def test_board_shape(self):
        board = make_board(6, 5)
        self.assertEqual(board.category_count, 6)
        self.assertEqual(board.questions_per_category, 5)
        self.assertEqual(board.cell_count, 30)
        self.assertEqual(board.titles, [f"title {c}" for c in range(6)])

    def test_new_clues_start_hidden(self):
        clue = Clue(question="2+2", answer="4")
        self.assertIs(clue.showing, RevealState.HIDDEN)
        self.assertIsNone(clue.visible_text)

    def test_public_dict_never_contains_hidden_text(self):
        board = make_board()
        board.categories[0].clues[1].showing = RevealState.QUESTION
        public = board.to_public_dict()

        self.assertEqual(public['categories'][0]['clues'][0], {'showing': 'hidden', 'text': None})
        self.assertEqual(public['categories'][0]['clues'][1], {'showing': 'question', 'text': 'q01'})
        self.assertNotIn('a01', str(public))
        self.assertNotIn('q00', str(public))

    def test_public_dict_shows_answer_once_revealed(self):
        board = make_board()
        board.categories[1].clues[0].showing = RevealState.ANSWER
        public = board.to_public_dict()
        self.assertEqual(public['categories'][1]['clues'][0], {'showing': 'answer', 'text': 'a10'})

    def test_serialization_keeps_board_id_and_states(self):
        board = make_board()
        board.categories[1].clues[1].showing = RevealState.ANSWER

        restored = Board.from_dict(board.to_dict())

        self.assertEqual(restored.board_id, board.board_id)
        self.assertEqual(restored.titles, board.titles)
        self.assertIs(restored.categories[1].clues[1].showing, RevealState.ANSWER)
        self.assertIs(restored.categories[0].clues[0].showing, RevealState.HIDDEN)

    def test_board_ids_are_unique(self):
        self.assertNotEqual(make_board().board_id, make_board().board_id)

    def test_iter_cells_visits_every_cell_once(self):
        board = make_board(3, 4)
        keys = [coordinate.cell_key for coordinate, _clue in board.iter_cells()]
        self.assertEqual(len(keys), 12)
        self.assertEqual(len(set(keys)), 12)
        self.assertEqual(keys[0], "0_0")
        self.assertEqual(keys[-1], "2_3")


class TestCellCoordinate(SimpleTestCase):
    def test_from_values_parses_ui_strings(self):
        coordinate = CellCoordinate.from_values("2", " 3 ")
        self.assertEqual(coordinate, CellCoordinate(2, 3))

    def test_from_cell_key(self):
        self.assertEqual(CellCoordinate.from_cell_key("1_4"), CellCoordinate(1, 4))
        self.assertEqual(CellCoordinate(1, 4).cell_key, "1_4")

    def test_invalid_values_are_rejected(self):
        for category_index, clue_index in [("a", 0), (0, "1.5"), (-1, 0), (0, -2), (None, 0)]:
            with self.subTest(category_index=category_index, clue_index=clue_index):
                with self.assertRaises(OutOfRangeError):
                    CellCoordinate.from_values(category_index, clue_index)

    def test_bools_are_not_indices(self):
        with self.assertRaises(OutOfRangeError):
            CellCoordinate(True, 0)

    def test_malformed_cell_key(self):
        for cell_key in ["", "1", "1_2_3", "x_y"]:
            with self.subTest(cell_key=cell_key):
                with self.assertRaises(OutOfRangeError):
                    CellCoordinate.from_cell_key(cell_key)

    def test_bounds_are_checked_against_the_board(self):
        board = make_board(2, 3)
        self.assertEqual(board.get_clue(CellCoordinate(1, 2)).question, "q12")
        with self.assertRaises(OutOfRangeError):
            board.get_clue(CellCoordinate(2, 0))
        with self.assertRaises(OutOfRangeError):
            board.get_clue(CellCoordinate(0, 3))


class TestBoardConfig(SimpleTestCase):
    def test_defaults(self):
        config = BoardConfig()
        self.assertEqual(config.category_count, 6)
        self.assertEqual(config.questions_per_category, 5)
        self.assertEqual(config.cell_count, 30)
        self.assertIs(config.validate(), config)

    def test_invalid_values(self):
        for overrides in [
            {'category_count': 0},
            {'questions_per_category': -1},
            {'category_count': "6"},
            {'max_fetch_workers': True},
            {'category_count': 10, 'candidate_pool_size': 5},
        ]:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ConfigurationError):
                    BoardConfig(**overrides).validate()

    def test_from_settings_uses_defaults_for_missing_values(self):
        class Settings:
            JEOPARDY_CATEGORY_COUNT = 3
            JEOPARDY_PARALLEL_FETCH = True

        config = BoardConfig.from_settings(Settings())
        self.assertEqual(config.category_count, 3)
        self.assertEqual(config.questions_per_category, 5)
        self.assertTrue(config.parallel_fetch)

    def test_dict_round_trip(self):
        config = BoardConfig(category_count=2, questions_per_category=3)
        self.assertEqual(BoardConfig.from_dict(config.to_dict()), config)
