from django.test import SimpleTestCase

from board_core.abstract_game_state import InMemoryGameSession, reveal_clue
from board_core.exceptions import BuildCancelledError, GameStateError, OutOfRangeError, StaleBoardError
from board_core.models import Board, Category, CellCoordinate, Clue, RevealState


def make_board():
    return Board(
        categories=[
            Category(title="math", clues=[Clue(question="2+2", answer="4"), Clue(question="3*3", answer="9")]),
            Category(title="words", clues=[Clue(question="opposite of up", answer="down"), Clue(question="a", answer="b")]),
        ]
    )


class TestRevealClue(SimpleTestCase):
    def test_hidden_to_question_to_answer(self):
        clue = Clue(question="2+2", answer="4")

        self.assertEqual(reveal_clue(clue), ("2+2", True))
        self.assertIs(clue.showing, RevealState.QUESTION)

        self.assertEqual(reveal_clue(clue), ("4", True))
        self.assertIs(clue.showing, RevealState.ANSWER)

    def test_answer_is_terminal(self):
        clue = Clue(question="2+2", answer="4", showing=RevealState.ANSWER)
        for _ in range(3):
            self.assertEqual(reveal_clue(clue), (None, False))
            self.assertIs(clue.showing, RevealState.ANSWER)


class TestInMemoryGameSession(SimpleTestCase):
    def setUp(self):
        self.session = InMemoryGameSession()
        self.board = self.session.publish_board(make_board())

    def test_three_clicks_on_one_cell(self):
        coordinate = CellCoordinate(0, 0)

        first = self.session.handle_reveal(coordinate)
        self.assertEqual(first.text, "2+2")
        self.assertIs(first.showing, RevealState.QUESTION)
        self.assertTrue(first.changed)

        second = self.session.handle_reveal(coordinate)
        self.assertEqual(second.text, "4")
        self.assertIs(second.showing, RevealState.ANSWER)

        third = self.session.handle_reveal(coordinate)
        self.assertIsNone(third.text)
        self.assertFalse(third.changed)
        self.assertIs(third.showing, RevealState.ANSWER)

    def test_reveal_only_touches_the_clicked_clue(self):
        self.session.handle_reveal(CellCoordinate(1, 0))
        states = {coordinate.cell_key: clue.showing for coordinate, clue in self.session.board.iter_cells()}
        self.assertIs(states.pop("1_0"), RevealState.QUESTION)
        self.assertTrue(all(state is RevealState.HIDDEN for state in states.values()))

    def test_result_to_dict(self):
        result = self.session.handle_reveal(CellCoordinate(0, 1))
        self.assertEqual(
            result.to_dict(), {'category': 0, 'clue': 1, 'text': '3*3', 'showing': 'question', 'changed': True}
        )

    def test_out_of_range_click(self):
        with self.assertRaises(OutOfRangeError):
            self.session.handle_reveal(CellCoordinate(2, 0))
        with self.assertRaises(OutOfRangeError):
            self.session.handle_reveal(CellCoordinate(0, 2))

    def test_reveal_without_board(self):
        with self.assertRaises(GameStateError):
            InMemoryGameSession().handle_reveal(CellCoordinate(0, 0))

    def test_click_for_replaced_board_is_rejected(self):
        old_board_id = self.board.board_id
        self.session.publish_board(make_board())

        with self.assertRaises(StaleBoardError):
            self.session.handle_reveal(CellCoordinate(0, 0), board_id=old_board_id)
        self.assertIs(self.session.board.categories[0].clues[0].showing, RevealState.HIDDEN)

    def test_click_with_current_board_id(self):
        result = self.session.handle_reveal(CellCoordinate(0, 0), board_id=self.session.board.board_id)
        self.assertTrue(result.changed)

    def test_publish_replaces_board_wholesale(self):
        self.session.handle_reveal(CellCoordinate(0, 0))
        new_board = self.session.publish_board(make_board())
        self.assertIs(self.session.board, new_board)
        self.assertIs(self.session.board.categories[0].clues[0].showing, RevealState.HIDDEN)

    def test_superseded_build_cannot_publish(self):
        first_token = self.session.begin_build()
        second_token = self.session.begin_build()
        self.assertFalse(self.session.is_current_build(first_token))
        self.assertTrue(self.session.is_current_build(second_token))

        with self.assertRaises(BuildCancelledError):
            self.session.publish_board(make_board(), first_token)
        self.assertIs(self.session.board, self.board)

        published = self.session.publish_board(make_board(), second_token)
        self.assertIs(self.session.board, published)
        self.assertIsNone(self.session.build_token)

    def test_session_dict_round_trip(self):
        self.session.handle_reveal(CellCoordinate(1, 1))
        restored = InMemoryGameSession().from_dict(self.session.to_dict())
        self.assertEqual(restored.board.board_id, self.board.board_id)
        self.assertIs(restored.board.categories[1].clues[1].showing, RevealState.QUESTION)

    def test_sessions_are_independent(self):
        other = InMemoryGameSession()
        other.publish_board(make_board())
        self.session.handle_reveal(CellCoordinate(0, 0))
        self.assertIs(other.board.categories[0].clues[0].showing, RevealState.HIDDEN)
