from __future__ import annotations

import unittest

from core.history import OperationHistory


class OperationHistoryTests(unittest.TestCase):
    def test_starts_at_identity(self) -> None:
        hist = OperationHistory("id")
        self.assertEqual(hist.entries, ["id"])
        self.assertEqual(hist.cursor, 0)
        self.assertFalse(hist.can_undo)
        self.assertFalse(hist.can_redo)
        self.assertFalse(hist.undo())
        self.assertFalse(hist.redo())

    def test_undo_redo_round_trip(self) -> None:
        hist = OperationHistory("id")
        for n in range(5):
            hist.apply(f"op{n}")
        after_apply = (hist.entries, hist.cursor)

        for _ in range(5):
            self.assertTrue(hist.undo())
        self.assertEqual(hist.cursor, 0)
        self.assertEqual(hist.active_entries(), ["id"])

        for _ in range(5):
            self.assertTrue(hist.redo())
        self.assertEqual((hist.entries, hist.cursor), after_apply)
        self.assertFalse(hist.can_redo)

    def test_apply_after_undo_discards_redo_branch(self) -> None:
        hist = OperationHistory("id")
        hist.apply("a")
        hist.apply("b")
        hist.undo()
        hist.apply("c")
        self.assertEqual(hist.entries, ["id", "a", "c"])
        self.assertEqual(hist.cursor, 2)
        self.assertFalse(hist.redo())

    def test_active_entries_follow_cursor(self) -> None:
        hist = OperationHistory("id")
        hist.apply("a")
        hist.apply("b")
        hist.undo()
        self.assertEqual(hist.active_entries(), ["id", "a"])
        self.assertEqual(len(hist), 3)

    def test_reset_and_replace(self) -> None:
        hist = OperationHistory("id")
        hist.apply("a")
        hist.apply("b")
        hist.undo()
        hist.reset()
        self.assertEqual(hist.entries, ["id"])
        self.assertEqual(hist.cursor, 0)

        hist.replace(["x", "y"])
        self.assertEqual(hist.entries, ["id", "x", "y"])
        self.assertEqual(hist.cursor, 2)

    def test_entries_is_a_copy(self) -> None:
        hist = OperationHistory("id")
        hist.entries.append("sneaky")
        self.assertEqual(len(hist), 1)


if __name__ == "__main__":
    unittest.main()
