import asyncio

import pytest
from textual.widgets import Button, Input, Static, TextArea

from hadith_api import (
    FILL_BLANKS,
    MULTIPLE_CHOICE,
    ApiError,
    CheckAnswerResponse,
    Companion,
    CorrectAnswer,
    Hadith,
    QuizQuestion,
    Source,
)
from hadith_gui import (
    MSG_COMPANION_REQUIRED,
    MSG_HADITH_ADDED,
    MSG_INCORRECT,
    MSG_LIST_FAILED,
    MSG_NO_QUESTION,
    MSG_SOURCE_REQUIRED,
    MSG_TEXT_REQUIRED,
    AddHadithScreen,
    HadithApp,
    HadithListScreen,
    QuizScreen,
    format_correct_answer,
    validate_hadith_form,
)
from multi_select import MultiSelect
from quiz_state import ANSWERING, INCORRECT, REVEALED


class FakeApi:
    def __init__(self, hadiths=None, questions=None, check_results=None) -> None:
        self.hadiths = hadiths if hadiths is not None else []
        self.questions = list(questions or [])
        self.check_results = list(check_results or [])
        self.companions = [Companion(id=1, name="عمر بن الخطاب")]
        self.sources = [Source(id=1, name="البخاري")]
        self.created = []
        self.checked = []
        self.closed = False

    def get_hadiths(self):
        if isinstance(self.hadiths, Exception):
            raise self.hadiths
        return self.hadiths

    def get_companions(self):
        return self.companions

    def get_sources(self):
        return self.sources

    def create_companion(self, name):
        companion = Companion(id=len(self.companions) + 1, name=name)
        self.companions.append(companion)
        return companion

    def create_source(self, name):
        source = Source(id=len(self.sources) + 1, name=name)
        self.sources.append(source)
        return source

    def create_hadith(self, text, companion_ids, source_ids):
        self.created.append((text, companion_ids, source_ids))
        return Hadith(id=10, text=text)

    def get_random_question(self, question_types=None):
        item = self.questions.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def check_answer(self, request):
        self.checked.append(request)
        return CheckAnswerResponse(is_correct=self.check_results.pop(0))

    def get_correct_answer(self, hadith_id, question_type, blank_indices=None):
        return CorrectAnswer(correct_words=["النبي", "صلى"], full_text="قال النبي رسول الله صلى")

    def close(self) -> None:
        self.closed = True


FILL_QUESTION = QuizQuestion(
    id=5,
    text="قال النبي رسول الله صلى",
    type=FILL_BLANKS,
    blank_text="قال ____ رسول الله ____",
    blank_words=["النبي", "صلى"],
    blank_indices=[1, 4],
)


async def settle(app, pilot) -> None:
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


def test_validate_hadith_form() -> None:
    assert validate_hadith_form("  ", [1], [1]) == MSG_TEXT_REQUIRED
    assert validate_hadith_form("نص", [], [1]) == MSG_COMPANION_REQUIRED
    assert validate_hadith_form("نص", [1], []) == MSG_SOURCE_REQUIRED
    assert validate_hadith_form("نص", [1], [2]) is None


def test_format_correct_answer() -> None:
    text = format_correct_answer(
        FILL_QUESTION, CorrectAnswer(correct_words=["النبي", "صلى"], full_text="النص")
    )
    assert "الكلمات الصحيحة: النبي, صلى" in text
    assert text.endswith("النص الكامل:\nالنص")

    mc = QuizQuestion(id=1, text="x", type=MULTIPLE_CHOICE)
    text = format_correct_answer(
        mc,
        CorrectAnswer(
            correct_companions=[{"id": 1, "name": "عمر"}, {"id": 2, "name": "أنس"}],
            correct_sources=[{"id": 1, "name": "مسلم"}],
        ),
    )
    assert "الصحابة: عمر, أنس" in text
    assert "المخرجون: مسلم" in text


def test_list_shows_one_card_per_hadith() -> None:
    api = FakeApi(hadiths=[
        Hadith(id=1, text="إنما الأعمال بالنيات", companions=[{"id": 1, "name": "عمر"}]),
        Hadith(id=2, text="الدين النصيحة"),
    ])

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 50)) as pilot:
            await settle(app, pilot)
            screen = app.screen
            assert isinstance(screen, HadithListScreen)
            assert len(screen.query(".hadith-card")) == 2
            assert not screen.is_loading
            assert screen.error is None

    asyncio.run(run())
    assert not api.closed


def test_list_failure_shows_error() -> None:
    api = FakeApi(hadiths=ApiError("down"))

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 50)) as pilot:
            await settle(app, pilot)
            assert app.screen.error == MSG_LIST_FAILED
            assert len(app.screen.query(".hadith-card")) == 0

    asyncio.run(run())


def test_router_replaces_screen_and_rejects_unknown_routes() -> None:
    async def run() -> None:
        app = HadithApp(api=FakeApi(questions=[FILL_QUESTION]))
        async with app.run_test(size=(120, 50)) as pilot:
            await settle(app, pilot)
            assert app.current_route == "/"

            app.navigate("/add")
            await settle(app, pilot)
            assert isinstance(app.screen, AddHadithScreen)
            depth = len(app.screen_stack)

            await pilot.press("3")
            await settle(app, pilot)
            assert isinstance(app.screen, QuizScreen)
            assert app.current_route == "/quiz"
            assert len(app.screen_stack) == depth

            with pytest.raises(ValueError):
                app.navigate("/settings")

    asyncio.run(run())


def test_add_with_empty_text_does_not_call_backend() -> None:
    api = FakeApi()

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 60)) as pilot:
            app.navigate("/add")
            await settle(app, pilot)
            screen = app.screen
            screen.selected_companions = [1]
            screen.selected_sources = [1]

            screen.submit()
            await settle(app, pilot)

            assert screen.form_message == ("error", MSG_TEXT_REQUIRED)

    asyncio.run(run())
    assert api.created == []


def test_add_submits_and_clears_form() -> None:
    api = FakeApi()

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 60)) as pilot:
            app.navigate("/add")
            await settle(app, pilot)
            screen = app.screen
            assert screen.query_one("#companions", MultiSelect).options == api.companions

            screen.query_one("#hadith-text", TextArea).load_text("إنما الأعمال بالنيات")
            screen.query_one("#companions", MultiSelect).toggle_option(1)
            screen.query_one("#sources", MultiSelect).toggle_option(1)
            await pilot.pause()
            assert screen.selected_companions == [1]

            screen.submit()
            await settle(app, pilot)

            assert screen.form_message == ("success", MSG_HADITH_ADDED)
            assert screen.query_one("#hadith-text", TextArea).text == ""
            assert screen.selected_companions == []
            assert screen.query_one("#sources", MultiSelect).selected == []
            assert not screen.query_one("#btn-submit", Button).disabled

    asyncio.run(run())
    assert api.created == [("إنما الأعمال بالنيات", [1], [1])]


@pytest.mark.parametrize(
    "select_id, selected_attr, name",
    [
        ("#companions", "selected_companions", "أبو هريرة"),
        ("#sources", "selected_sources", "الترمذي"),
    ],
)
def test_inline_add_appends_option_and_selects_it_once(select_id, selected_attr, name) -> None:
    api = FakeApi()

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 60)) as pilot:
            app.navigate("/add")
            await settle(app, pilot)
            screen = app.screen
            select = screen.query_one(select_id, MultiSelect)
            select.open_dropdown()
            select.adding = True
            select.query_one(".ms-add-input", Input).value = name
            await pilot.pause()

            select.submit_new()
            await settle(app, pilot)

            assert [o.id for o in select.options] == [1, 2]
            assert select.options[-1].name == name
            assert getattr(screen, selected_attr).count(2) == 1
            assert select.selected == [2]
            assert not select.adding
            assert select.query_one(".ms-add-input", Input).value == ""

    asyncio.run(run())


def test_click_outside_closes_picker_and_keeps_selection() -> None:
    async def run() -> None:
        app = HadithApp(api=FakeApi())
        async with app.run_test(size=(120, 60)) as pilot:
            app.navigate("/add")
            await settle(app, pilot)
            screen = app.screen
            select = screen.query_one("#companions", MultiSelect)
            select.query_one(".ms-filter", Input).focus()
            await pilot.pause()
            select.toggle_option(1)
            select.adding = True
            select.query_one(".ms-add-input", Input).value = "سلمان"
            await pilot.pause()
            assert select.is_open

            await pilot.click(".section-title")
            await pilot.pause()

            assert not select.is_open
            assert not select.adding
            assert select.query_one(".ms-add-input", Input).value == ""
            assert screen.selected_companions == [1]
            assert select.selected == [1]

    asyncio.run(run())

def test_fill_blanks_retry_keeps_question() -> None:
    api = FakeApi(questions=[FILL_QUESTION], check_results=[False])

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 60)) as pilot:
            app.navigate("/quiz")
            await settle(app, pilot)
            screen = app.screen
            fields = list(screen.query(".fill-input").results(Input))
            assert len(fields) == 2
            assert len(screen.query(".blank-segment")) == 3

            fields[0].value = "النبى"
            await pilot.pause()
            screen.check_answer()
            await settle(app, pilot)

            assert screen.session.phase == INCORRECT
            assert api.checked[0].filled_words == ["النبى", ""]
            assert screen.query_one("#btn-retry", Button).display
            result = screen.query_one("#quiz-result", Static)
            assert result.display
            assert result.has_class("incorrect")
            assert not result.has_class("correct")
            assert MSG_INCORRECT in str(result.render())

            screen.try_again()
            await pilot.pause()

            assert not result.display
            assert screen.session.phase == ANSWERING
            assert screen.session.question.id == 5
            assert [f.value for f in screen.query(".fill-input").results(Input)] == ["", ""]

    asyncio.run(run())


def test_reveal_locks_inputs() -> None:
    api = FakeApi(questions=[FILL_QUESTION], check_results=[False])

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 60)) as pilot:
            app.navigate("/quiz")
            await settle(app, pilot)
            screen = app.screen
            screen.check_answer()
            await settle(app, pilot)

            screen.reveal_answer()
            await settle(app, pilot)

            assert screen.session.phase == REVEALED
            assert screen.session.correct_answer.full_text == "قال النبي رسول الله صلى"
            assert all(f.disabled for f in screen.query(".fill-input").results(Input))
            assert not screen.query_one("#btn-retry", Button).display

    asyncio.run(run())


def test_new_question_after_reveal_starts_clean() -> None:
    next_question = FILL_QUESTION.model_copy(update={"id": 6})
    api = FakeApi(questions=[FILL_QUESTION, next_question], check_results=[False])

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 60)) as pilot:
            app.navigate("/quiz")
            await settle(app, pilot)
            screen = app.screen
            list(screen.query(".fill-input").results(Input))[0].value = "النبى"
            await pilot.pause()
            screen.check_answer()
            await settle(app, pilot)
            screen.reveal_answer()
            await settle(app, pilot)
            assert screen.session.phase == REVEALED

            screen.new_question()
            await settle(app, pilot)

            assert screen.session.question.id == 6
            assert not screen.session.has_answered
            assert not screen.session.show_answer
            fields = list(screen.query(".fill-input").results(Input))
            assert len(fields) == 2
            assert all(not f.disabled and f.value == "" for f in fields)
            assert not screen.query_one("#quiz-result", Static).display
            assert not screen.query_one("#quiz-answer", Static).display
            assert screen.query_one("#btn-check", Button).display

    asyncio.run(run())


def test_missing_question_message() -> None:
    api = FakeApi(questions=[ApiError("no questions", 404)])

    async def run() -> None:
        app = HadithApp(api=api)
        async with app.run_test(size=(120, 60)) as pilot:
            app.navigate("/quiz")
            await settle(app, pilot)
            assert app.screen.session.error == MSG_NO_QUESTION
            assert not app.screen.query_one("#question-area").display

    asyncio.run(run())
