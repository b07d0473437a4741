"""Random display strings: cancellation jokes, praise, and starter titles.

None of these influence control flow. Callers pick one at random when
showing a screen.
"""

from __future__ import annotations

import random

DISAPPOINTMENT_TITLE = "Timer cancelled"

_DISAPPOINTMENTS: list[str] = [
    "This wasn't very Doable of you.",
    "You left the timer hanging. Rude.",
    "The timer was getting lonely.",
    "Come back! The timer misses you.",
    "That was a soft commitment.",
    "You ghosted the timer.",
    "Not your finest moment, champ.",
]

_SUCCESSES: list[str] = [
    "Done and dusted.",
    "That one is off the list.",
    "You said you would, and you did.",
    "Another one bites the dust.",
    "Look at you, getting things done.",
]

_NEW_TASK_SUGGESTIONS: list[str] = [
    "Water the plants",
    "Reply to that email",
    "Take out the trash",
    "Call mum",
    "Go for a walk",
    "Tidy the desk",
    "Read ten pages",
    "Drink a glass of water",
    "Stretch for five minutes",
    "Plan tomorrow",
    "Pay the bills",
    "Clean the kitchen",
    "Back up the phone",
    "Book the appointment",
    "Do the laundry",
    "Build an empire",
]

_REMINDER_TITLES: list[str] = [
    "Your streak is on the line",
    "Still Doable today",
    "One small task?",
    "Don't break the chain",
    "Your to-do list misses you",
]


def get_disappointment() -> str:
    """Return a random message for an abandoned timer run."""
    return random.choice(_DISAPPOINTMENTS)


def get_success() -> str:
    """Return a random message for a completed task."""
    return random.choice(_SUCCESSES)


def get_new_task_suggestion() -> str:
    """Return a friendly placeholder title for a new task."""
    return random.choice(_NEW_TASK_SUGGESTIONS)


def get_reminder_title() -> str:
    """Return a random title for a streak reminder."""
    return random.choice(_REMINDER_TITLES)
