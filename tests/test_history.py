#!/usr/bin/env python3
"""
Tests for the input history buffer.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest

from siteterm.terminal import CommandHistory


class TestCommandHistory(unittest.TestCase):
    """Test command history management."""

    def setUp(self):
        self.history = CommandHistory()

    def fill(self, *lines):
        for line in lines:
            self.history.add(line)

    def test_add_commands(self):
        self.fill("cmd1", "cmd2", "cmd3")
        self.assertEqual(self.history.history, ["cmd1", "cmd2", "cmd3"])
        self.assertEqual(self.history.position, 3)

    def test_blank_lines_not_recorded(self):
        self.fill("", "   ", "ls")
        self.assertEqual(self.history.history, ["ls"])

    def test_lines_stored_verbatim(self):
        self.fill("  echo   hi ")
        self.assertEqual(self.history.history, ["  echo   hi "])

    def test_duplicates_kept(self):
        self.fill("ls", "ls", "ls")
        self.assertEqual(len(self.history), 3)

    def test_unbounded_by_default(self):
        for i in range(5000):
            self.history.add(f"echo {i}")
        self.assertEqual(len(self.history), 5000)

    def test_optional_max_size(self):
        history = CommandHistory(max_size=2)
        for line in ["a", "b", "c"]:
            history.add(line)
        self.assertEqual(history.history, ["b", "c"])

    def test_previous_walks_back_and_clamps(self):
        self.fill("cmd1", "cmd2", "cmd3")
        self.assertEqual(self.history.previous(), "cmd3")
        self.assertEqual(self.history.previous(), "cmd2")
        self.assertEqual(self.history.previous(), "cmd1")
        # Clamped at the oldest entry
        self.assertEqual(self.history.previous(), "cmd1")
        self.assertEqual(self.history.previous(), "cmd1")
        self.assertEqual(self.history.position, 0)

    def test_previous_on_empty_history(self):
        self.assertIsNone(self.history.previous())
        self.assertEqual(self.history.position, 0)

    def test_next_returns_blank_past_newest(self):
        self.fill("cmd1", "cmd2")
        self.history.previous()
        self.history.previous()
        self.assertEqual(self.history.next(), "cmd2")
        self.assertEqual(self.history.next(), "")
        self.assertEqual(self.history.position, 2)
        # Already on a fresh line
        self.assertEqual(self.history.next(), "")
        self.assertEqual(self.history.position, 2)

    def test_next_without_browsing(self):
        self.fill("cmd1")
        self.assertEqual(self.history.next(), "")
        self.assertEqual(self.history.position, 1)

    def test_add_resets_position(self):
        self.fill("cmd1", "cmd2")
        self.history.previous()
        self.history.previous()
        self.history.add("cmd3")
        self.assertEqual(self.history.position, 3)
        self.assertEqual(self.history.previous(), "cmd3")

    def test_blank_add_also_resets_position(self):
        self.fill("cmd1", "cmd2")
        self.history.previous()
        self.history.add("   ")
        self.assertEqual(self.history.position, 2)


if __name__ == '__main__':
    unittest.main()
