#!/usr/bin/env python3
"""
Hadith Memorization: Textual TUI client
=======================================
Three views over the hadith backend: the hadith list, the add-hadith form,
and the quiz (multiple choice / fill in the blanks).

Run:
    pip install -e .
    hadith-memo --api-url http://localhost:8080/api
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import (
    Button, Checkbox, Footer, Header, Input, Label, Rule, Static, TextArea,
)

from hadith_api import FILL_BLANKS, MULTIPLE_CHOICE, ApiError, HadithApi
from hadith_config import settings
from hadith_logging import setup_logging
from multi_select import DismissDropdownsOnClick, MultiSelect
from quiz_state import (
    BLANK_MARKER, CORRECT, FAILED, INCORRECT, REVEALED,
    QuizSession, split_blank_text,
)

log = logging.getLogger(__name__)

# ── Constants ─────────────────────────────────────────────────────────────────

APP_TITLE = "تطبيق حفظ الأحاديث"

ROUTE_LIST = "/"
ROUTE_ADD = "/add"
ROUTE_QUIZ = "/quiz"

NAV_LABELS = {
    ROUTE_LIST: "الأحاديث",
    ROUTE_ADD:  "إضافة حديث",
    ROUTE_QUIZ: "الأسئلة",
}

QUESTION_TYPE_LABELS = {
    MULTIPLE_CHOICE: "اختيار متعدد (اختيار الصحابي والمخرج)",
    FILL_BLANKS:     "إكمال الحديث (تكملة الكلمات الناقصة)",
}

# list view
MSG_LOADING = "جاري التحميل..."
MSG_LIST_FAILED = "فشل في تحميل الأحاديث"
MSG_LIST_EMPTY = "لا توجد أحاديث مضافة بعد"

# add view
MSG_TEXT_REQUIRED = "يرجى إدخال نص الحديث"
MSG_COMPANION_REQUIRED = "يرجى اختيار صحابي واحد على الأقل"
MSG_SOURCE_REQUIRED = "يرجى اختيار مخرج واحد على الأقل"
MSG_OPTIONS_FAILED = "فشل في تحميل البيانات"
MSG_ADD_COMPANION_FAILED = "فشل في إضافة الصحابي"
MSG_ADD_SOURCE_FAILED = "فشل في إضافة المخرج"
MSG_HADITH_ADDED = "تم إضافة الحديث بنجاح"
MSG_ADD_HADITH_FAILED = "فشل في إضافة الحديث"
LABEL_SUBMIT = "إضافة الحديث"
LABEL_SUBMITTING = "جاري الإضافة..."

# quiz view
MSG_QUESTION_LOADING = "جاري تحميل السؤال..."
MSG_QUESTION_FAILED = "فشل في تحميل السؤال"
MSG_NO_QUESTION = "لا يوجد سؤال متاح"
MSG_CHECK_FAILED = "فشل في التحقق من الإجابة"
MSG_ANSWER_FAILED = "فشل في تحميل الإجابة الصحيحة"
MSG_CORRECT = "✅ إجابة صحيحة! أحسنت"
MSG_INCORRECT = "❌ إجابة خاطئة، حاول مرة أخرى"
LABEL_CHECK = "فحص الإجابة"
LABEL_CHECKING = "جاري التحقق..."
LABEL_REVEAL = "عرض الإجابة الصحيحة"
LABEL_REVEALING = "جاري التحميل..."

# ── Helpers ───────────────────────────────────────────────────────────────────


def join_names(items) -> str:
    return ", ".join(item.name for item in items)


def validate_hadith_form(text: str, companion_ids, source_ids) -> str | None:
    """Return the first validation error for the add-hadith form, or None."""
    if not text or not text.strip():
        return MSG_TEXT_REQUIRED
    if not companion_ids:
        return MSG_COMPANION_REQUIRED
    if not source_ids:
        return MSG_SOURCE_REQUIRED
    return None


def format_correct_answer(question, answer) -> str:
    lines = ["الإجابة الصحيحة:"]
    if question.type == MULTIPLE_CHOICE:
        lines.append(f"الصحابة: {join_names(answer.correct_companions)}")
        lines.append(f"المخرجون: {join_names(answer.correct_sources)}")
    else:
        lines.append(f"الكلمات الصحيحة: {', '.join(answer.correct_words or [])}")
    lines.append("")
    lines.append("النص الكامل:")
    lines.append(answer.full_text)
    return "\n".join(lines)


# ── Shared widgets ────────────────────────────────────────────────────────────


class NavBar(Horizontal):
    """Links between the three views; the app handles the presses."""

    def __init__(self, active: str) -> None:
        super().__init__(id="nav")
        self.active = active

    def compose(self) -> ComposeResult:
        for route, label in NAV_LABELS.items():
            yield Button(
                label,
                name=route,
                classes="nav-btn",
                variant="primary" if route == self.active else "default",
            )


class HadithCard(Vertical):
    def __init__(self, hadith) -> None:
        super().__init__(classes="hadith-card")
        self.hadith = hadith

    def compose(self) -> ComposeResult:
        yield Static(self.hadith.text, classes="hadith-text", markup=False)
        yield Static(
            f"الصحابة: {join_names(self.hadith.companions)}",
            classes="hadith-meta", markup=False,
        )
        yield Static(
            f"المخرجون: {join_names(self.hadith.sources)}",
            classes="hadith-meta", markup=False,
        )


# ── Hadith List Screen ────────────────────────────────────────────────────────


class HadithListScreen(Screen):
    """Every stored hadith with its companions and sources."""

    BINDINGS = [Binding("r", "reload", "Reload")]

    def __init__(self) -> None:
        super().__init__()
        self.hadiths: list = []
        self.error: str | None = None
        self.is_loading = True
        self._seq = 0

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield NavBar(ROUTE_LIST)
        with Container(id="list-layout"):
            yield Static("قائمة الأحاديث", classes="section-title")
            yield Rule()
            yield Static(MSG_LOADING, id="list-status")
            yield VerticalScroll(id="hadith-list")
        yield Footer()

    def on_mount(self) -> None:
        self.load_hadiths()

    @work(group="hadiths")
    async def load_hadiths(self) -> None:
        self._seq += 1
        token = self._seq
        self.is_loading = True
        self.error = None
        self._show_status(MSG_LOADING)
        try:
            hadiths = await asyncio.to_thread(self.app.api.get_hadiths)
        except ApiError as exc:
            if token != self._seq:
                return
            log.warning("Loading hadiths failed: %s", exc)
            self.is_loading = False
            self.error = MSG_LIST_FAILED
            await self.query_one("#hadith-list").remove_children()
            self._show_status(MSG_LIST_FAILED, error=True)
            return
        if token != self._seq:
            return
        self.is_loading = False
        self.hadiths = hadiths
        container = self.query_one("#hadith-list", VerticalScroll)
        await container.remove_children()
        if not hadiths:
            self._show_status(MSG_LIST_EMPTY)
            return
        self._show_status(None)
        await container.mount_all([HadithCard(h) for h in hadiths])

    def _show_status(self, text: str | None, error: bool = False) -> None:
        status = self.query_one("#list-status", Static)
        status.display = text is not None
        status.set_class(error, "error")
        status.update(text or "")
        self.query_one("#hadith-list").display = text is None

    def action_reload(self) -> None:
        self.load_hadiths()


# ── Add Hadith Screen ─────────────────────────────────────────────────────────


class AddHadithScreen(DismissDropdownsOnClick, Screen):
    """Form: hadith text, companions and sources (both can be created inline)."""

    def __init__(self) -> None:
        super().__init__()
        self.companions: list = []
        self.sources: list = []
        self.selected_companions: list = []
        self.selected_sources: list = []
        self.submitting = False
        self._seq = 0
        self.form_message: tuple | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield NavBar(ROUTE_ADD)
        with VerticalScroll(id="add-layout"):
            yield Static("إضافة حديث جديد", classes="section-title")
            yield Rule()
            yield Static(id="form-message", classes="message")
            yield Label("نص الحديث:")
            yield TextArea(id="hadith-text")
            yield MultiSelect(
                label="الصحابة:",
                placeholder="ابحث عن صحابي...",
                on_add_new=self.add_companion,
                add_new_placeholder="اسم الصحابي الجديد",
                id="companions",
            )
            yield MultiSelect(
                label="المخرجون:",
                placeholder="ابحث عن مخرج...",
                on_add_new=self.add_source,
                add_new_placeholder="اسم المخرج الجديد",
                id="sources",
            )
            yield Button(LABEL_SUBMIT, id="btn-submit", variant="primary")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#form-message", Static).display = False
        self.load_options()

    def _show_message(self, kind: str, text: str) -> None:
        self.form_message = (kind, text)
        box = self.query_one("#form-message", Static)
        box.update(text)
        box.set_class(kind == "success", "success")
        box.set_class(kind == "error", "error")
        box.display = True
        self.notify(text, severity="information" if kind == "success" else "error")

    @work(group="options")
    async def load_options(self) -> None:
        self._seq += 1
        token = self._seq
        api = self.app.api
        try:
            companions, sources = await asyncio.gather(
                asyncio.to_thread(api.get_companions),
                asyncio.to_thread(api.get_sources),
            )
        except ApiError as exc:
            if token != self._seq:
                return
            log.warning("Loading companions/sources failed: %s", exc)
            self._show_message("error", MSG_OPTIONS_FAILED)
            return
        if token != self._seq:
            return
        self.companions = companions
        self.sources = sources
        self.query_one("#companions", MultiSelect).set_options(companions)
        self.query_one("#sources", MultiSelect).set_options(sources)

    # ── Inline creation (passed to the MultiSelects) ──────────────────────────

    async def add_companion(self, name: str):
        try:
            companion = await asyncio.to_thread(self.app.api.create_companion, name)
        except ApiError as exc:
            log.warning("Creating companion %r failed: %s", name, exc)
            self._show_message("error", MSG_ADD_COMPANION_FAILED)
            return None
        self.companions = self.companions + [companion]
        if companion.id not in self.selected_companions:
            self.selected_companions = self.selected_companions + [companion.id]
        select = self.query_one("#companions", MultiSelect)
        select.set_options(self.companions)
        select.set_selected(self.selected_companions)
        return companion

    async def add_source(self, name: str):
        try:
            source = await asyncio.to_thread(self.app.api.create_source, name)
        except ApiError as exc:
            log.warning("Creating source %r failed: %s", name, exc)
            self._show_message("error", MSG_ADD_SOURCE_FAILED)
            return None
        self.sources = self.sources + [source]
        if source.id not in self.selected_sources:
            self.selected_sources = self.selected_sources + [source.id]
        select = self.query_one("#sources", MultiSelect)
        select.set_options(self.sources)
        select.set_selected(self.selected_sources)
        return source

    # ── Submit ────────────────────────────────────────────────────────────────

    def submit(self) -> None:
        if self.submitting:
            return
        text = self.query_one("#hadith-text", TextArea).text
        problem = validate_hadith_form(text, self.selected_companions, self.selected_sources)
        if problem:
            self._show_message("error", problem)
            return
        self.create_hadith(text, list(self.selected_companions), list(self.selected_sources))

    def _set_submitting(self, value: bool) -> None:
        self.submitting = value
        button = self.query_one("#btn-submit", Button)
        button.disabled = value
        button.label = LABEL_SUBMITTING if value else LABEL_SUBMIT

    @work(group="submit")
    async def create_hadith(self, text: str, companion_ids: list, source_ids: list) -> None:
        self._set_submitting(True)
        try:
            await asyncio.to_thread(self.app.api.create_hadith, text, companion_ids, source_ids)
        except ApiError as exc:
            log.warning("Creating hadith failed: %s", exc)
            self._show_message("error", MSG_ADD_HADITH_FAILED)
            return
        finally:
            self._set_submitting(False)
        self._show_message("success", MSG_HADITH_ADDED)
        self.query_one("#hadith-text", TextArea).load_text("")
        self.selected_companions = []
        self.selected_sources = []
        self.query_one("#companions", MultiSelect).set_selected([])
        self.query_one("#sources", MultiSelect).set_selected([])

    # ── Handlers ──────────────────────────────────────────────────────────────

    @on(MultiSelect.Changed, "#companions")
    def on_companions_changed(self, event: MultiSelect.Changed) -> None:
        self.selected_companions = event.selected

    @on(MultiSelect.Changed, "#sources")
    def on_sources_changed(self, event: MultiSelect.Changed) -> None:
        self.selected_sources = event.selected

    @on(Button.Pressed, "#btn-submit")
    def on_submit_btn(self) -> None:
        self.submit()


# ── Quiz Screen ───────────────────────────────────────────────────────────────


class QuizScreen(DismissDropdownsOnClick, Screen):
    """One random question at a time; the backend checks every answer."""

    BINDINGS = [
        Binding("n", "new_question", "New question"),
        Binding("s", "toggle_settings", "Settings"),
        Binding("ctrl+r", "reveal", "Answer", show=False),
        Binding("t", "try_again", "Try again", show=False),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.session = QuizSession(settings.DEFAULT_QUESTION_TYPES)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield NavBar(ROUTE_QUIZ)
        with VerticalScroll(id="quiz-layout"):
            with Horizontal(id="quiz-header"):
                yield Static("اختبار حفظ الأحاديث", classes="section-title")
                yield Button("⚙️ إعدادات", id="btn-settings")
                yield Button("سؤال جديد", id="btn-new", variant="warning")
            with Vertical(id="quiz-settings"):
                yield Static("نوع الأسئلة:")
                for qtype, label in QUESTION_TYPE_LABELS.items():
                    yield Checkbox(label, value=True, id=f"type-{qtype}", classes="type-option")
                yield Button("تطبيق الإعدادات", id="btn-apply", variant="primary")
            yield Rule()
            yield Static(MSG_QUESTION_LOADING, id="quiz-status")
            yield Vertical(id="question-area")
            with Horizontal(id="quiz-actions"):
                yield Button(LABEL_CHECK, id="btn-check", variant="primary")
                yield Button(LABEL_REVEAL, id="btn-reveal")
                yield Button("حاول مرة أخرى", id="btn-retry", variant="warning")
                yield Button("سؤال جديد", id="btn-next", variant="success")
            yield Static(id="quiz-notice", classes="error")
            yield Static(id="quiz-result", classes="result")
            yield Static(id="quiz-answer", classes="answer-text", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self.new_question()

    # ── View sync ─────────────────────────────────────────────────────────────

    def _update_view(self) -> None:
        s = self.session
        status = self.query_one("#quiz-status", Static)
        if s.loading:
            status.update(MSG_QUESTION_LOADING)
        elif s.phase == FAILED:
            status.update(s.error or MSG_QUESTION_FAILED)
        status.display = s.loading or s.phase == FAILED
        status.set_class(s.phase == FAILED, "error")

        has_question = s.question is not None
        self.query_one("#question-area").display = has_question

        self.query_one("#quiz-settings").display = s.show_settings
        for qtype in QUESTION_TYPE_LABELS:
            self.query_one(f"#type-{qtype}", Checkbox).value = qtype in s.enabled_types

        check = self.query_one("#btn-check", Button)
        check.display = s.can_submit or s.checking
        check.disabled = s.checking
        check.label = LABEL_CHECKING if s.checking else LABEL_CHECK

        answered = s.phase in (CORRECT, INCORRECT)
        reveal = self.query_one("#btn-reveal", Button)
        reveal.display = answered
        reveal.disabled = s.loading_answer
        reveal.label = LABEL_REVEALING if s.loading_answer else LABEL_REVEAL

        self.query_one("#btn-retry", Button).display = s.can_retry and not s.show_answer
        self.query_one("#btn-next", Button).display = answered or s.phase == REVEALED

        notice = self.query_one("#quiz-notice", Static)
        notice.display = s.notice is not None
        notice.update(s.notice or "")

        result = self.query_one("#quiz-result", Static)
        result.display = s.is_correct is not None and s.phase in (CORRECT, INCORRECT, REVEALED)
        result.update(MSG_CORRECT if s.is_correct else MSG_INCORRECT)
        result.set_class(bool(s.is_correct), "correct")
        result.set_class(s.is_correct is False, "incorrect")

        answer = self.query_one("#quiz-answer", Static)
        answer.display = s.show_answer and s.correct_answer is not None
        if s.show_answer and s.correct_answer is not None:
            answer.update(format_correct_answer(s.question, s.correct_answer))
        else:
            answer.update("")

        locked = s.inputs_locked
        for inp in self.query(".fill-input").results(Input):
            inp.disabled = locked
        for select in self.query(".mc-select").results(MultiSelect):
            select.disabled = locked

    async def _rebuild_question(self) -> None:
        area = self.query_one("#question-area", Vertical)
        await area.remove_children()
        q = self.session.question
        if q is None:
            return
        if q.type == MULTIPLE_CHOICE:
            await area.mount_all([
                Static(q.text, classes="hadith-text", markup=False),
                MultiSelect(
                    q.companions or [],
                    label="اختر الصحابي/الصحابة:",
                    placeholder="ابحث عن صحابي...",
                    id="mc-companions", classes="mc-select",
                ),
                MultiSelect(
                    q.sources or [],
                    label="اختر المخرج/المخرجين:",
                    placeholder="ابحث عن مخرج...",
                    id="mc-sources", classes="mc-select",
                ),
            ])
            return

        words = q.blank_words or []
        widgets = [Static("أكمل الكلمات المفقودة:", classes="section-title")]
        for i, part in enumerate(split_blank_text(q.blank_text)):
            widgets.append(Static(part, classes="blank-segment", markup=False))
            if i < q.blank_count:
                field = Input(placeholder=BLANK_MARKER, name=str(i), classes="fill-input")
                field.styles.width = max(len(words[i]) + 6, 12)
                widgets.append(field)
        await area.mount_all(widgets)

    # ── Transitions ───────────────────────────────────────────────────────────

    def new_question(self) -> None:
        token = self.session.begin_load()
        self._update_view()
        self.fetch_question(token, list(self.session.enabled_types))

    @work(group="quiz-load")
    async def fetch_question(self, token: int, question_types: list) -> None:
        try:
            question = await asyncio.to_thread(self.app.api.get_random_question, question_types)
        except ApiError as exc:
            message = MSG_NO_QUESTION if exc.status_code == 404 else MSG_QUESTION_FAILED
            if self.session.fail_load(token, message):
                log.warning("Loading question failed: %s", exc)
                await self._rebuild_question()
                self._update_view()
            return
        if self.session.finish_load(token, question):
            log.info("Question %s (%s)", question.id, question.type)
            await self._rebuild_question()
            self._update_view()

    def check_answer(self) -> None:
        token = self.session.begin_check()
        if token is None:
            return
        request = self.session.build_check_request()
        self._update_view()
        self.submit_answer(token, request)

    @work(group="quiz-check")
    async def submit_answer(self, token: int, request) -> None:
        try:
            response = await asyncio.to_thread(self.app.api.check_answer, request)
        except ApiError as exc:
            if self.session.fail_check(token, MSG_CHECK_FAILED):
                log.warning("Checking answer failed: %s", exc)
                self.notify(MSG_CHECK_FAILED, severity="error")
                self._update_view()
            return
        if self.session.finish_check(token, response.is_correct):
            self._update_view()

    def reveal_answer(self) -> None:
        token = self.session.begin_reveal()
        if token is None:
            return
        q = self.session.question
        self._update_view()
        self.fetch_answer(token, q.id, q.type, list(q.blank_indices or []))

    @work(group="quiz-answer")
    async def fetch_answer(self, token: int, hadith_id: int, qtype: str, blank_indices: list) -> None:
        try:
            answer = await asyncio.to_thread(
                self.app.api.get_correct_answer, hadith_id, qtype, blank_indices
            )
        except ApiError as exc:
            if self.session.fail_reveal(token, MSG_ANSWER_FAILED):
                log.warning("Loading correct answer failed: %s", exc)
                self.notify(MSG_ANSWER_FAILED, severity="error")
                self._update_view()
            return
        if self.session.finish_reveal(token, answer):
            self._update_view()

    def try_again(self) -> None:
        if not self.session.retry():
            return
        for inp in self.query(".fill-input").results(Input):
            inp.value = ""
        for select in self.query(".mc-select").results(MultiSelect):
            select.set_selected([])
        self._update_view()

    # ── Keyboard actions ──────────────────────────────────────────────────────

    def action_new_question(self) -> None:
        self.new_question()

    def action_toggle_settings(self) -> None:
        self.session.toggle_settings()
        self._update_view()

    def action_reveal(self) -> None:
        self.reveal_answer()

    def action_try_again(self) -> None:
        self.try_again()

    # ── Button / Input handlers ───────────────────────────────────────────────

    @on(Button.Pressed, "#btn-new")
    @on(Button.Pressed, "#btn-next")
    def on_new(self) -> None:
        self.new_question()

    @on(Button.Pressed, "#btn-settings")
    def on_settings(self) -> None:
        self.action_toggle_settings()

    @on(Button.Pressed, "#btn-apply")
    def on_apply(self) -> None:
        token = self.session.apply_settings()
        self._update_view()
        self.fetch_question(token, list(self.session.enabled_types))

    @on(Checkbox.Changed, ".type-option")
    def on_type_changed(self, event: Checkbox.Changed) -> None:
        qtype = event.checkbox.id.removeprefix("type-")
        if event.value == (qtype in self.session.enabled_types):
            return
        if not self.session.toggle_type(qtype):
            # the last enabled type stays on
            event.checkbox.value = True

    @on(Button.Pressed, "#btn-check")
    def on_check(self) -> None:
        self.check_answer()

    @on(Button.Pressed, "#btn-reveal")
    def on_reveal(self) -> None:
        self.reveal_answer()

    @on(Button.Pressed, "#btn-retry")
    def on_retry(self) -> None:
        self.try_again()

    @on(Input.Changed, ".fill-input")
    def on_fill_changed(self, event: Input.Changed) -> None:
        s = self.session
        index = int(event.input.name)
        if index >= len(s.fill_inputs) or s.fill_inputs[index] == event.value:
            return
        s.set_fill_input(index, event.value)

    @on(MultiSelect.Changed, "#mc-companions")
    def on_companions_changed(self, event: MultiSelect.Changed) -> None:
        self.session.set_companions(event.selected)

    @on(MultiSelect.Changed, "#mc-sources")
    def on_sources_changed(self, event: MultiSelect.Changed) -> None:
        self.session.set_sources(event.selected)


# ── App ───────────────────────────────────────────────────────────────────────


ROUTES = {
    ROUTE_LIST: HadithListScreen,
    ROUTE_ADD:  AddHadithScreen,
    ROUTE_QUIZ: QuizScreen,
}


class HadithApp(App):
    TITLE = APP_TITLE
    SUB_TITLE = "Hadith memorization"

    CSS = """
    Screen { background: $surface; }

    #nav {
        height: 3;
        dock: top;
        padding: 0 1;
        background: $panel;
    }
    .nav-btn { margin: 0 1 0 0; }

    #list-layout, #add-layout, #quiz-layout {
        padding: 1 2;
        height: 1fr;
    }
    .section-title { color: $accent; text-style: bold; }

    #list-status { padding: 1 0; }
    #hadith-list { height: 1fr; }
    .hadith-card {
        height: auto;
        border: solid $primary-darken-2;
        padding: 0 1;
        margin: 0 0 1 0;
    }
    .hadith-text { padding: 1 0; }
    .hadith-meta { color: $text-muted; }

    .message { padding: 0 1; margin: 0 0 1 0; }
    .success { color: $success; text-style: bold; }
    .error   { color: $error; text-style: bold; }

    #hadith-text { height: 8; margin: 0 0 1 0; }

    #quiz-header { height: 3; }
    #quiz-header .section-title { width: 1fr; padding: 1 0; }
    #quiz-settings {
        height: auto;
        border: solid $accent;
        padding: 0 1;
        margin: 1 0;
    }
    #question-area { height: auto; }
    .blank-segment { padding: 0 0; }
    .fill-input { margin: 0 0 1 0; }
    #quiz-actions { height: 3; margin-top: 1; }

    .result { padding: 1 0; text-style: bold; }
    .result.correct   { color: $success; }
    .result.incorrect { color: $error; }
    .answer-text { padding: 1 0; }

    Button { margin: 0 1 0 0; }
    Rule   { margin: 1 0; }
    """

    BINDINGS = [
        Binding("1", "show_list", "Hadiths"),
        Binding("2", "show_add",  "Add"),
        Binding("3", "show_quiz", "Quiz"),
    ]

    def __init__(self, api: HadithApi | None = None) -> None:
        super().__init__()
        self._owns_api = api is None
        self.api = api or HadithApi()
        self.current_route: str | None = None

    def navigate(self, route: str) -> None:
        """Replace the current view with a fresh screen for *route*."""
        if route not in ROUTES:
            raise ValueError(f"unknown route {route!r}")
        screen = ROUTES[route]()
        log.debug("Navigating %s -> %s", self.current_route, route)
        self.current_route = route
        if len(self.screen_stack) > 1:
            self.switch_screen(screen)
        else:
            self.push_screen(screen)

    def on_mount(self) -> None:
        self.navigate(ROUTE_LIST)

    def on_unmount(self) -> None:
        if self._owns_api:
            self.api.close()

    def action_show_list(self) -> None:
        self.navigate(ROUTE_LIST)

    def action_show_add(self) -> None:
        self.navigate(ROUTE_ADD)

    def action_show_quiz(self) -> None:
        self.navigate(ROUTE_QUIZ)

    @on(Button.Pressed, ".nav-btn")
    def on_nav(self, event: Button.Pressed) -> None:
        self.navigate(event.button.name)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Hadith memorization -- terminal client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
  1 / 2 / 3   hadith list / add hadith / quiz
  n           new question (quiz)
  s           quiz settings

Environment:
  HADITH_API_URL, HADITH_API_TIMEOUT, HADITH_LOG_DIR, HADITH_LOG_LEVEL
        """,
    )
    parser.add_argument(
        "--api-url",
        default=settings.API_BASE_URL,
        help=f"Backend base URL (default: {settings.API_BASE_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.REQUEST_TIMEOUT,
        help="Request timeout in seconds",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Do not write a log file",
    )
    args = parser.parse_args()

    level = logging.DEBUG if args.debug else getattr(logging, settings.LOG_LEVEL, logging.INFO)
    setup_logging(level, None if args.no_log_file else settings.log_path)
    log.info("Starting %s against %s", settings.PROJECT_NAME, args.api_url)

    HadithApp(HadithApi(base_url=args.api_url, timeout=args.timeout)).run()


if __name__ == "__main__":
    main()
