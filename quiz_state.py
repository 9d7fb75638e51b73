"""
Quiz session state
==================
UI-free state machine behind the quiz screen:

    loading -> ready -> answering -> checking -> correct | incorrect -> revealed

"New question" is allowed from any phase and discards everything about the
current question. Every backend call is tagged with a token from a single
monotonically increasing sequence; a response is applied only while its token
is still the latest one of its kind, so a slow response can never overwrite
state produced by a newer user action.
"""

from __future__ import annotations

import logging

from hadith_api import (
    FILL_BLANKS,
    MULTIPLE_CHOICE,
    QUESTION_TYPES,
    CheckAnswerRequest,
    CorrectAnswer,
    QuizQuestion,
)

log = logging.getLogger(__name__)

BLANK_MARKER = "____"

LOADING = "loading"
FAILED = "failed"
READY = "ready"
ANSWERING = "answering"
CHECKING = "checking"
CORRECT = "correct"
INCORRECT = "incorrect"
REVEALED = "revealed"


def split_blank_text(blank_text: str, marker: str = BLANK_MARKER) -> list:
    """'a ____ b ____' -> ['a ', ' b ', '']; an input goes after each of the first N parts."""
    return (blank_text or "").split(marker)


class QuizSession:
    def __init__(self, question_types=QUESTION_TYPES) -> None:
        self.enabled_types: list = list(question_types)
        self.show_settings = False

        self.question: QuizQuestion | None = None
        self.phase = LOADING
        self.error: str | None = None
        self.notice: str | None = None

        self._seq = 0
        self._load_token: int | None = None
        self._check_token: int | None = None
        self._reveal_token: int | None = None

        self._reset_question_state()

    # ── Internals ─────────────────────────────────────────────────────────────

    def _next_token(self) -> int:
        self._seq += 1
        return self._seq

    def _reset_answer(self) -> None:
        self.selected_companions: list = []
        self.selected_sources: list = []
        blanks = self.question.blank_count if self.question else 0
        self.fill_inputs: list = [""] * blanks

    def _reset_question_state(self) -> None:
        self._reset_answer()
        self.has_answered = False
        self.show_answer = False
        self.is_correct: bool | None = None
        self.can_retry = False
        self.correct_answer: CorrectAnswer | None = None
        self.notice = None
        self._check_token = None
        self._reveal_token = None

    def _touch(self) -> None:
        if self.phase == READY:
            self.phase = ANSWERING

    # ── Derived flags ─────────────────────────────────────────────────────────

    @property
    def loading(self) -> bool:
        return self.phase == LOADING

    @property
    def checking(self) -> bool:
        return self.phase == CHECKING

    @property
    def loading_answer(self) -> bool:
        return self._reveal_token is not None

    @property
    def inputs_locked(self) -> bool:
        return self.phase in (CHECKING, REVEALED)

    @property
    def can_submit(self) -> bool:
        return self.question is not None and self.phase in (READY, ANSWERING)

    @property
    def can_reveal(self) -> bool:
        return self.phase in (CORRECT, INCORRECT) and not self.loading_answer

    # ── Loading ───────────────────────────────────────────────────────────────

    def begin_load(self) -> int:
        """Start fetching a new question; returns the token for the request."""
        token = self._next_token()
        self._load_token = token
        self.phase = LOADING
        self.error = None
        self.question = None
        self._reset_question_state()
        return token

    def finish_load(self, token: int, question: QuizQuestion) -> bool:
        if token != self._load_token:
            log.debug("Dropping stale question response %s (latest %s)", token, self._load_token)
            return False
        self._load_token = None
        self.question = question
        self._reset_question_state()
        self.phase = READY
        return True

    def fail_load(self, token: int, message: str) -> bool:
        if token != self._load_token:
            return False
        self._load_token = None
        self.question = None
        self.error = message
        self.phase = FAILED
        return True

    # ── Answer input ──────────────────────────────────────────────────────────

    def set_companions(self, ids) -> None:
        if self.inputs_locked:
            return
        self.selected_companions = list(ids)
        self._touch()

    def set_sources(self, ids) -> None:
        if self.inputs_locked:
            return
        self.selected_sources = list(ids)
        self._touch()

    def set_fill_input(self, index: int, value: str) -> None:
        if self.inputs_locked:
            return
        if not 0 <= index < len(self.fill_inputs):
            raise ValueError(f"blank index {index} out of range")
        self.fill_inputs[index] = value
        self._touch()

    def build_check_request(self) -> CheckAnswerRequest:
        q = self.question
        if q is None:
            raise ValueError("no question loaded")
        if q.type == MULTIPLE_CHOICE:
            return CheckAnswerRequest(
                hadith_id=q.id,
                question_type=q.type,
                companion_ids=list(self.selected_companions),
                source_ids=list(self.selected_sources),
            )
        if q.type == FILL_BLANKS:
            return CheckAnswerRequest(
                hadith_id=q.id,
                question_type=q.type,
                filled_words=list(self.fill_inputs),
                blank_indices=list(q.blank_indices or []),
            )
        raise ValueError(f"unknown question type {q.type!r}")

    # ── Checking ──────────────────────────────────────────────────────────────

    def begin_check(self) -> int | None:
        """Lock the inputs and return a token, or None if submitting isn't allowed now."""
        if not self.can_submit:
            return None
        token = self._next_token()
        self._check_token = token
        self.has_answered = True
        self.notice = None
        self.phase = CHECKING
        return token

    def finish_check(self, token: int, is_correct: bool) -> bool:
        if token != self._check_token:
            return False
        self._check_token = None
        self.is_correct = bool(is_correct)
        self.can_retry = not self.is_correct
        self.phase = CORRECT if self.is_correct else INCORRECT
        return True

    def fail_check(self, token: int, message: str) -> bool:
        if token != self._check_token:
            return False
        self._check_token = None
        self.has_answered = False
        self.notice = message
        self.phase = ANSWERING
        return True

    def retry(self) -> bool:
        """Clear the answer and try the same question again."""
        if not self.can_retry or self.show_answer or self.phase != INCORRECT:
            return False
        self._reset_answer()
        self.has_answered = False
        self.is_correct = None
        self.can_retry = False
        self.notice = None
        self._reveal_token = None
        self.phase = ANSWERING
        return True

    # ── Reveal ────────────────────────────────────────────────────────────────

    def begin_reveal(self) -> int | None:
        if not self.can_reveal:
            return None
        token = self._next_token()
        self._reveal_token = token
        self.notice = None
        return token

    def finish_reveal(self, token: int, answer: CorrectAnswer) -> bool:
        if token != self._reveal_token:
            return False
        self._reveal_token = None
        self.correct_answer = answer
        self.show_answer = True
        self.can_retry = False
        self.phase = REVEALED
        return True

    def fail_reveal(self, token: int, message: str) -> bool:
        if token != self._reveal_token:
            return False
        self._reveal_token = None
        self.notice = message
        return True

    # ── Settings ──────────────────────────────────────────────────────────────

    def toggle_settings(self) -> None:
        self.show_settings = not self.show_settings

    def toggle_type(self, question_type: str) -> bool:
        """Enable or disable a question type; the last enabled type stays on."""
        if question_type not in QUESTION_TYPES:
            raise ValueError(f"unknown question type {question_type!r}")
        if question_type in self.enabled_types:
            if len(self.enabled_types) == 1:
                return False
            self.enabled_types = [t for t in self.enabled_types if t != question_type]
        else:
            self.enabled_types = self.enabled_types + [question_type]
        return True

    def apply_settings(self) -> int:
        """Close the panel and start loading a question with the new filter."""
        self.show_settings = False
        return self.begin_load()
