"""Single-line input modal for the TUI.

Used for every key binding that needs text from the user: new task titles,
who a task is waiting for, project names, contexts and comments. Enter
submits, Escape cancels.

Example usage:
    modal = PromptModal("Waiting for", placeholder="Who are you waiting on?")
    self.app.push_screen(modal, callback=handle_answer)
"""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Input, Static

REQUIRED_MESSAGE = "A value is required"


class PromptModal(ModalScreen[Optional[str]]):
    """Ask for one line of text.

    Dismisses with the stripped answer, or None when cancelled. An empty
    answer is refused unless ``allow_empty`` is set, in which case it
    dismisses with "".
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    CSS = """
    PromptModal {
        align: center middle;
        background: rgba(0, 0, 0, 0.5);
    }

    PromptModal > Container {
        width: 60;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    #prompt-title {
        text-style: bold;
        color: $primary;
        padding: 0 0 1 0;
    }

    #prompt-hint {
        color: $text-muted;
    }

    #prompt-error {
        color: $error;
        height: auto;
    }
    """

    def __init__(
        self,
        title: str,
        *,
        placeholder: str = "",
        value: str = "",
        hint: Optional[str] = None,
        allow_empty: bool = False,
    ) -> None:
        super().__init__()
        self._title = title
        self._placeholder = placeholder
        self._value = value
        self._hint = hint or ("Enter to save, empty to clear" if allow_empty else "Enter to save")
        self._allow_empty = allow_empty

    @staticmethod
    def clean(raw: str, allow_empty: bool) -> Optional[str]:
        """Stripped answer, or None when an empty answer is not allowed."""
        value = raw.strip()
        if not value and not allow_empty:
            return None
        return value

    def compose(self) -> ComposeResult:
        with Container():
            yield Static(self._title, id="prompt-title", markup=False)
            yield Input(value=self._value, placeholder=self._placeholder, id="prompt-input")
            yield Static(self._hint, id="prompt-hint")
            yield Static("", id="prompt-error")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Dismiss with the answer, or show why it was refused."""
        event.stop()
        answer = self.clean(event.value, self._allow_empty)
        if answer is None:
            self.query_one("#prompt-error", Static).update(REQUIRED_MESSAGE)
            return
        self.dismiss(answer)

    def action_cancel(self) -> None:
        self.dismiss(None)
