"""
Break messages and the non-repeating picker the screens draw from.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Set

BREAK_MESSAGES = [
    "Your code can wait. Your wrists cannot.",
    "Even React needs to re-render. So do you.",
    "Debugging your health is not optional.",
    "Your future self is thanking you right now.",
    "Coffee break? More like code break.",
    "Rest is not lazy. It's strategic.",
    "Your keyboard will still be there. Promise.",
    "Burnout is a bug. This is the hotfix.",
    "Step away. The semicolons will survive.",
    "Your brain needs garbage collection too.",
]

WARNING_MESSAGES = [
    "Break incoming in 60 seconds...",
    "Heads up! Break time approaching...",
    "60 seconds until mandatory rest...",
    "Your brain requested a break...",
]

LOCKDOWN_MESSAGES = [
    "LOCKDOWN ACTIVE - Time to rest",
    "Screen locked. Health unlocked.",
    "No escape. Only rest.",
]


class MessagePicker:
    """
    Picks messages at random without repeating until the pool is exhausted.

    One picker per message pool; the used set resets once every message has
    been shown.
    """

    def __init__(self, messages: Sequence[str], rng: Optional[random.Random] = None) -> None:
        if not messages:
            raise ValueError("MessagePicker needs at least one message")
        self.messages: List[str] = list(messages)
        self._rng = rng or random.Random()
        self._used: Set[int] = set()

    def pick(self) -> str:
        if len(self._used) >= len(self.messages):
            self._used.clear()
        available = [i for i in range(len(self.messages)) if i not in self._used]
        index = self._rng.choice(available)
        self._used.add(index)
        return self.messages[index]

    def reset(self) -> None:
        self._used.clear()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Holds the text CodeLock shows when a break is coming, when the screen
#   locks, and while the user rests. MessagePicker hands out one at a time.
#
# Key design decisions:
#   - The pools are plain module-level lists, easy to edit or translate.
#   - Each picker keeps its own used set, so the warning pool and the
#     lockdown pool cycle independently.
#   - The random generator is injectable. Tests pass a seeded Random and get
#     a repeatable order.
#
# Interviewer-friendly talking points:
#   1. "No repeats until exhausted" is a shuffle without precomputing one:
#      pick from what is left, reset once nothing is.
#   2. An empty pool fails at construction, not on the first pick in the
#      middle of a lockdown.
