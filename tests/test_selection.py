"""Tests for change selection."""

from unittest.mock import patch

import pytest

from selection import parse_selection, select_changes


class TestParseSelection:
    """parse_selection."""

    @pytest.mark.parametrize("answer,expected", [
        ("all", [0, 1, 2, 3, 4]),
        ("A", [0, 1, 2, 3, 4]),
        ("*", [0, 1, 2, 3, 4]),
        ("", []),
        ("2", [1]),
        ("1,3-4", [0, 2, 3]),
        ("4 1", [0, 3]),
        ("3-1", []),
        ("0,6,2", [1]),
        ("x,2-y,5", [4]),
        ("2,2,1-2", [0, 1]),
    ])
    def test_answers(self, answer, expected):
        assert parse_selection(answer, 5) == expected


class TestSelectChanges:
    """select_changes."""

    def test_non_interactive_selects_all(self):
        choices = ["a", "b"]
        assert select_changes(choices, "Pick", interactive=False) == ["a", "b"]

    @patch("selection.Prompt.ask", return_value="2")
    def test_interactive_prompt(self, mock_ask):
        assert select_changes(["a", "b", "c"], "Pick", interactive=True) == ["b"]
        mock_ask.assert_called_once()

    @patch("selection.Prompt.ask", return_value="")
    def test_interactive_none(self, _mock_ask):
        assert select_changes(["a"], "Pick", interactive=True) == []
