"""
Searchable multi-select control
===============================
Selected items show as removable tags above a filter input; the dropdown
lists the filtered options with checkbox markers. Options are any objects
with ``id`` and ``name`` (companions, sources). The parent owns the option
list and injects it with ``set_options``; selection changes are reported with
a ``MultiSelect.Changed`` message.

Screens that host pickers mix in ``DismissDropdownsOnClick`` so a click
anywhere outside an open picker closes it.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

from rich.text import Text
from textual import events, on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Button, Input, Label, OptionList, Static
from textual.widgets.option_list import Option

NO_RESULTS = "لا توجد نتائج للبحث"
SHOW_ADD_LABEL = "+ إضافة جديد"
CONFIRM_ADD_LABEL = "إضافة"
CANCEL_ADD_LABEL = "إلغاء"


# ── Selection helpers ─────────────────────────────────────────────────────────


def filter_options(options, term: str) -> list:
    """Options whose name contains *term*, ignoring case. Order is kept."""
    needle = (term or "").casefold()
    return [o for o in options if needle in o.name.casefold()]


def toggle_selection(selected, option_id: int) -> list:
    """Remove the id if selected, append it otherwise (insertion order)."""
    if option_id in selected:
        return [i for i in selected if i != option_id]
    return list(selected) + [option_id]


def remove_selection(selected, option_id: int) -> list:
    return [i for i in selected if i != option_id]


def selected_options(options, selected) -> list:
    chosen = set(selected)
    return [o for o in options if o.id in chosen]


def is_valid_new_name(name: str) -> bool:
    return bool(name and name.strip())


# ── Widget ────────────────────────────────────────────────────────────────────


class TagBar(Horizontal):
    """Selected items as buttons; pressing one removes it."""

    tags: reactive[list] = reactive(list, recompose=True)

    def compose(self) -> ComposeResult:
        for item in self.tags:
            yield Button(Text(f"{item.name} ✕"), name=str(item.id), classes="ms-tag")


class MultiSelect(Vertical):
    DEFAULT_CSS = """
    MultiSelect { height: auto; margin: 0 0 1 0; }
    MultiSelect .ms-label { color: $accent; text-style: bold; }
    MultiSelect TagBar { height: auto; }
    MultiSelect .ms-tag { min-width: 4; margin: 0 1 0 0; }
    MultiSelect .ms-search { height: auto; }
    MultiSelect .ms-filter { width: 1fr; margin: 0; }
    MultiSelect .ms-toggle { min-width: 5; }
    MultiSelect .ms-dropdown {
        height: auto;
        border: solid $primary-darken-2;
        padding: 0 1;
    }
    MultiSelect .ms-options { height: auto; max-height: 10; }
    MultiSelect .ms-empty { color: $text-muted; }
    MultiSelect .ms-add-form { height: auto; }
    MultiSelect .ms-add-input { width: 1fr; margin: 0; }
    """

    BINDINGS = [Binding("escape", "close_dropdown", "Close", show=False)]

    class Changed(Message):
        """Posted when the user changes the selection."""

        def __init__(self, multi_select: "MultiSelect", selected: list) -> None:
            super().__init__()
            self.multi_select = multi_select
            self.selected = list(selected)

        @property
        def control(self) -> "MultiSelect":
            return self.multi_select

    def __init__(
        self,
        options=(),
        selected=(),
        *,
        label: str = "",
        placeholder: str = "",
        on_add_new: Optional[Callable[[str], Awaitable[object]]] = None,
        add_new_placeholder: str = "",
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(id=id, classes=classes)
        self._options = list(options)
        self._selected = list(selected)
        self.label = label
        self.placeholder = placeholder
        self.add_new_callback = on_add_new
        self.add_new_placeholder = add_new_placeholder
        self.filter_text = ""
        self.is_open = False
        self.adding = False
        self._add_busy = False

    @property
    def options(self) -> list:
        return list(self._options)

    @property
    def selected(self) -> list:
        return list(self._selected)

    @property
    def visible_options(self) -> list:
        return filter_options(self._options, self.filter_text)

    def compose(self) -> ComposeResult:
        yield Label(Text(self.label), classes="ms-label")
        yield TagBar()
        with Horizontal(classes="ms-search"):
            yield Input(placeholder=self.placeholder, classes="ms-filter")
            yield Button("▼", classes="ms-toggle")
        with Vertical(classes="ms-dropdown"):
            yield OptionList(classes="ms-options")
            yield Static(NO_RESULTS, classes="ms-empty")
            if self.add_new_callback is not None:
                yield Button(SHOW_ADD_LABEL, classes="ms-show-add")
                with Horizontal(classes="ms-add-form"):
                    yield Input(placeholder=self.add_new_placeholder, classes="ms-add-input")
                    yield Button(
                        CONFIRM_ADD_LABEL, classes="ms-add-confirm",
                        variant="primary", disabled=True,
                    )
                    yield Button(CANCEL_ADD_LABEL, classes="ms-add-cancel")

    def on_mount(self) -> None:
        self.watch(self.screen, "focused", self._focus_changed, init=False)
        self._sync_view()

    # ── Parent-facing API ─────────────────────────────────────────────────────

    def set_options(self, options) -> None:
        self._options = list(options)
        self._sync_view()

    def set_selected(self, selected) -> None:
        self._selected = list(selected)
        self._sync_view()

    def open_dropdown(self) -> None:
        self.is_open = True
        self._sync_visibility()

    def close_dropdown(self) -> None:
        """Close the dropdown and cancel any half-typed new option."""
        self.is_open = False
        self._cancel_add()
        self._sync_visibility()

    def toggle_option(self, option_id: int) -> None:
        self._selected = toggle_selection(self._selected, option_id)
        self._sync_view()
        self.post_message(self.Changed(self, self._selected))

    def deselect(self, option_id: int) -> None:
        self._selected = remove_selection(self._selected, option_id)
        self._sync_view()
        self.post_message(self.Changed(self, self._selected))

    # ── Rendering ─────────────────────────────────────────────────────────────

    def _sync_view(self) -> None:
        if not self.is_mounted:
            return
        self.query_one(TagBar).tags = selected_options(self._options, self._selected)

        visible = self.visible_options
        option_list = self.query_one(".ms-options", OptionList)
        highlighted = option_list.highlighted
        option_list.clear_options()
        option_list.add_options(
            [
                Option(Text(f"{'☑' if o.id in self._selected else '☐'} {o.name}"), id=str(o.id))
                for o in visible
            ]
        )
        if visible and highlighted is not None:
            option_list.highlighted = min(highlighted, len(visible) - 1)
        option_list.display = bool(visible)
        self.query_one(".ms-empty", Static).display = not visible
        self._sync_visibility()

    def _sync_visibility(self) -> None:
        if not self.is_mounted:
            return
        self.query_one(".ms-dropdown").display = self.is_open
        if self.add_new_callback is None:
            return
        self.query_one(".ms-show-add", Button).display = not self.adding
        self.query_one(".ms-add-form").display = self.adding
        name = self.query_one(".ms-add-input", Input).value
        self.query_one(".ms-add-confirm", Button).disabled = (
            self._add_busy or not is_valid_new_name(name)
        )

    def _cancel_add(self) -> None:
        self.adding = False
        if self.add_new_callback is not None and self.is_mounted:
            self.query_one(".ms-add-input", Input).value = ""

    def _focus_changed(self, focused) -> None:
        if focused is None:
            return
        if self in focused.ancestors_with_self:
            if focused.has_class("ms-filter"):
                self.open_dropdown()
        elif self.is_open:
            self.close_dropdown()

    # ── Add-new flow ──────────────────────────────────────────────────────────

    @work(exclusive=True, group="add-new")
    async def submit_new(self) -> None:
        add_input = self.query_one(".ms-add-input", Input)
        name = add_input.value
        if self.add_new_callback is None or self._add_busy or not is_valid_new_name(name):
            return
        self._add_busy = True
        self._sync_visibility()
        try:
            created = await self.add_new_callback(name.strip())
        finally:
            self._add_busy = False
        if created is None:
            # creation failed; keep what was typed
            self._sync_visibility()
            return
        add_input.value = ""
        self.adding = False
        self.query_one(".ms-filter", Input).value = ""
        self.filter_text = ""
        self._sync_view()

    # ── Handlers ──────────────────────────────────────────────────────────────

    def action_close_dropdown(self) -> None:
        self.close_dropdown()

    @on(Input.Changed, ".ms-filter")
    def on_filter_changed(self, event: Input.Changed) -> None:
        event.stop()
        self.filter_text = event.value
        self._sync_view()

    @on(Input.Changed, ".ms-add-input")
    def on_add_name_changed(self, event: Input.Changed) -> None:
        event.stop()
        self._sync_visibility()

    @on(Input.Submitted, ".ms-add-input")
    def on_add_name_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.submit_new()

    @on(Input.Submitted, ".ms-filter")
    def on_filter_submitted(self, event: Input.Submitted) -> None:
        event.stop()

    @on(OptionList.OptionSelected, ".ms-options")
    def on_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if event.option_id is not None:
            self.toggle_option(int(event.option_id))

    @on(Button.Pressed, ".ms-tag")
    def on_tag_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.deselect(int(event.button.name))

    @on(Button.Pressed, ".ms-toggle")
    def on_toggle_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if self.is_open:
            self.close_dropdown()
        else:
            self.open_dropdown()

    @on(Button.Pressed, ".ms-show-add")
    def on_show_add(self, event: Button.Pressed) -> None:
        event.stop()
        self.adding = True
        self._sync_visibility()
        self.query_one(".ms-add-input", Input).focus()

    @on(Button.Pressed, ".ms-add-confirm")
    def on_confirm_add(self, event: Button.Pressed) -> None:
        event.stop()
        self.submit_new()

    @on(Button.Pressed, ".ms-add-cancel")
    def on_cancel_add(self, event: Button.Pressed) -> None:
        event.stop()
        self._cancel_add()
        self._sync_visibility()


def close_dropdowns_outside(root, widget) -> None:
    """Close every open MultiSelect under *root* that does not contain *widget*."""
    inside = widget.ancestors_with_self if widget is not None else []
    for select in root.query(MultiSelect):
        if select.is_open and select not in inside:
            select.close_dropdown()


class DismissDropdownsOnClick:
    """Screen mixin: pressing the mouse outside an open picker closes it."""

    def on_mouse_down(self, event: events.MouseDown) -> None:
        close_dropdowns_outside(self, event.widget)
