"""Tests for the message pickers."""

from __future__ import annotations

from unittest.mock import patch

from doable import encouragement


def test_pickers_return_text() -> None:
    for pick in (
        encouragement.get_disappointment,
        encouragement.get_success,
        encouragement.get_new_task_suggestion,
        encouragement.get_reminder_title,
    ):
        assert pick().strip()


@patch("doable.encouragement.random.choice", side_effect=lambda seq: seq[0])
def test_disappointment_comes_from_list(_mock_choice) -> None:
    assert encouragement.get_disappointment() == "This wasn't very Doable of you."
