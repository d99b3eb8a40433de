"""
workspace.py — per-user scratch state kept between script runs.

Open quiz attempts, their wall clocks, quiz drafts and the pending return
location all belong to whoever is signed in. They live in the same mapping as
the rest of the browser session (``st.session_state`` in the app), and
``reset`` drops every one of them when that user's session ends.
"""
from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Optional

from quizclient.attempt import AttemptState, QuizAttemptWorkflow

log = logging.getLogger(__name__)

ATTEMPT_PREFIX = "attempt:"
CLOCK_PREFIX = "attempt_clock:"

# keys and key prefixes owned by the signed-in user
USER_KEYS = (
    "submit_error",
    "return_to",
    "question_draft",
    "question_rev",
    "module_id",
    "quiz_id",
    "previous_location",
)
USER_PREFIXES = (ATTEMPT_PREFIX, CLOCK_PREFIX, "quiz_draft:", "quiz-", "q-", "ans-")


class ClientWorkspace:
    def __init__(self, backing: Optional[MutableMapping] = None):
        self._data = backing if backing is not None else {}

    # ── attempts ─────────────────────────────────────────────────────────────

    def attempt(self, quiz_id: str) -> Optional[QuizAttemptWorkflow]:
        return self._data.get(ATTEMPT_PREFIX + quiz_id)

    def keep_attempt(self, wf: QuizAttemptWorkflow) -> None:
        self._data[ATTEMPT_PREFIX + wf.quiz_id] = wf

    def drop_attempt(self, quiz_id: str) -> None:
        wf = self._data.pop(ATTEMPT_PREFIX + quiz_id, None)
        if wf is not None:
            wf.teardown()
        self._data.pop(CLOCK_PREFIX + quiz_id, None)

    def prepare_take(self, quiz_id: str) -> Optional[QuizAttemptWorkflow]:
        """
        Called before opening a quiz. Only an attempt still in progress is
        resumed; a submitted or never-started one is dropped so the page
        builds a fresh workflow.
        """
        wf = self.attempt(quiz_id)
        if wf is not None and wf.state is not AttemptState.IN_PROGRESS:
            self.drop_attempt(quiz_id)
            return None
        return wf

    # ── wall clock ───────────────────────────────────────────────────────────

    def start_clock(self, quiz_id: str, now: float) -> None:
        self._data[CLOCK_PREFIX + quiz_id] = now

    def advance_clock(self, quiz_id: str, now: float) -> int:
        """
        Whole seconds elapsed since the clock last advanced. Fractions carry
        over, so extra reruns never add seconds and a slow rerun catches up.
        """
        key = CLOCK_PREFIX + quiz_id
        last = self._data.get(key)
        if last is None:
            self._data[key] = now
            return 0
        elapsed = int(now - last)
        if elapsed > 0:
            self._data[key] = last + elapsed
        return max(elapsed, 0)

    # ── teardown ─────────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Forget everything the signed-in user left behind."""
        doomed = [
            key for key in list(self._data.keys())
            if key in USER_KEYS or (isinstance(key, str) and key.startswith(USER_PREFIXES))
        ]
        for key in doomed:
            value = self._data.pop(key, None)
            if isinstance(value, QuizAttemptWorkflow):
                value.teardown()
        if doomed:
            log.info("Cleared %d workspace entries", len(doomed))
