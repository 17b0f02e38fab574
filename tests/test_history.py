import unittest

from engine.Cards import Card
from engine.Core import Core, GameConfig, HistoryRecorder
from engine.Interface import Interface
from engine.State import WASTE, TableauSource


class UndoCounter(Interface):
    def __init__(self):
        super().__init__()
        self.undone = 0

    def onUndo(self):
        self.undone += 1


def visible(suit, rank):
    return Card(suit, rank, faceUp=True)


def hidden(suit, rank):
    return Card(suit, rank)


class HistoryTestCase(unittest.TestCase):
    def make_core(self, seed=17, historyLimit=None):
        config = GameConfig()
        config.seed = seed
        if historyLimit is not None:
            config.historyLimit = historyLimit
        core = Core(config, UndoCounter())
        core.newGame()
        return core

    def assertSameBoard(self, core, board, moves, passes):
        self.assertEqual(board, core.getState().encode())
        self.assertEqual(moves, core.getMoveCount())
        self.assertEqual(passes, core.getStockPass())

    def test_nothing_to_undo_after_new_game(self):
        core = self.make_core()
        self.assertFalse(core.canUndo())
        self.assertFalse(core.undo())
        self.assertEqual(0, core.interface.undone)

    def test_undo_draw(self):
        core = self.make_core()
        board = core.getState().encode()
        core.checkpoint()
        self.assertTrue(core.canUndo())
        core.draw()
        self.assertTrue(core.undo())
        self.assertSameBoard(core, board, 0, 0)
        self.assertTrue(all(not c.faceUp for c in core.getState().stock))
        self.assertFalse(core.canUndo())
        self.assertEqual(1, core.interface.undone)

    def test_undo_recycle_restores_pass_counter(self):
        core = self.make_core()
        state = core.getState()
        while state.stock:
            core.draw()
        board = state.encode()
        moves = core.getMoveCount()
        core.checkpoint()
        self.assertTrue(core.draw())
        self.assertEqual(1, core.getStockPass())
        self.assertTrue(core.undo())
        self.assertSameBoard(core, board, moves, 0)
        self.assertEqual([], state.stock)

    def test_undo_foundation_move(self):
        core = Core()
        core.state.waste.append(visible("spades", 1))
        board = core.state.encode()
        core.checkpoint()
        self.assertTrue(core.moveToFoundation(core.state.waste[-1], WASTE))
        self.assertTrue(core.undo())
        self.assertSameBoard(core, board, 0, 0)

    def test_undo_restores_flipped_card_face_down(self):
        core = Core()
        core.state.tableau[0] = [hidden("clubs", 9), visible("hearts", 12)]
        core.state.tableau[1] = [visible("clubs", 13)]
        board = core.state.encode()
        core.checkpoint()
        self.assertTrue(core.moveToTableau([core.state.tableau[0][-1]], 1, TableauSource(0)))
        self.assertTrue(core.state.tableau[0][0].faceUp)
        self.assertTrue(core.undo())
        self.assertSameBoard(core, board, 0, 0)
        self.assertFalse(core.state.tableau[0][0].faceUp)

    def test_undo_discards_pending_animations(self):
        core = Core()
        core.state.waste.append(visible("spades", 1))
        core.checkpoint()
        core.moveToFoundation(core.state.waste[-1], WASTE)
        core.undo()
        self.assertEqual([], core.consumeAnimations())

    def test_state_object_is_kept_across_undo(self):
        core = self.make_core()
        state = core.getState()
        core.checkpoint()
        core.draw()
        core.undo()
        self.assertIs(state, core.getState())

    def test_checkpoint_is_not_shared_with_live_state(self):
        core = self.make_core()
        board = core.getState().encode()
        core.checkpoint()
        core.getState().stock[-1].faceUp = True
        core.getState().tableau[6].append(core.getState().stock.pop())
        core.undo()
        self.assertEqual(board, core.getState().encode())

    def test_undo_walks_back_in_reverse_order(self):
        core = self.make_core()
        boards = []
        for _ in range(4):
            boards.append((core.getState().encode(), core.getMoveCount()))
            core.checkpoint()
            core.draw()
        for board, moves in reversed(boards):
            self.assertTrue(core.undo())
            self.assertSameBoard(core, board, moves, 0)
        self.assertFalse(core.undo())

    def test_history_is_capped(self):
        core = self.make_core(historyLimit=5)
        for _ in range(12):
            core.checkpoint()
            core.draw()
        self.assertEqual(5, len(core.history))
        undos = 0
        while core.canUndo():
            self.assertTrue(core.undo())
            undos += 1
        self.assertEqual(5, undos)
        self.assertEqual(7, core.getMoveCount())

    def test_new_game_clears_history(self):
        core = self.make_core()
        core.checkpoint()
        core.draw()
        core.newGame()
        self.assertFalse(core.canUndo())

    def test_recorder_rejects_bad_limit(self):
        with self.assertRaises(ValueError):
            HistoryRecorder(0)
        recorder = HistoryRecorder(2)
        self.assertIsNone(recorder.pop())

    def test_rollback_restores_evicted_entry(self):
        recorder = HistoryRecorder(2)
        self.assertFalse(recorder.rollback())
        for entry in ("a", "b", "c"):
            recorder.log(entry)
        self.assertTrue(recorder.rollback())
        self.assertEqual(2, len(recorder))
        self.assertEqual("b", recorder.pop())
        self.assertEqual("a", recorder.pop())
        self.assertIsNone(recorder.pop())


if __name__ == "__main__":
    unittest.main()
