"""Key dispatch for the picker.

Maps decoded key tokens to selection-model transitions, external launches,
or session exit. Unbound non-printable keys are ignored.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..scanner import Repository
from .events import KeyPressed, PickerEvent
from .model import SelectionModel


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small exact-match key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register bindings, later ones overwriting earlier handlers for a combo."""
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def __contains__(self, key: str) -> bool:
        return key in self._handlers

    def dispatch(self, key: str) -> bool | None:
        """Invoke bound handler for ``key`` and return its result, ``None`` if unbound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()


@dataclass(frozen=True)
class PickerKeyActions:
    """Fire-and-forget launches for the highlighted repository."""

    open_file_manager: Callable[[Repository], None]
    open_terminal: Callable[[Repository], None]
    open_in_browser: Callable[[Repository], None]


@dataclass(frozen=True)
class PickerExit:
    """Session end request; ``selection`` is ``None`` when cancelled."""

    selection: Repository | None = None


QUIT_KEYS: tuple[str, ...] = ("ESC", "CTRL_C")
CONFIRM_KEYS: tuple[str, ...] = ("ENTER",)
UP_KEYS: tuple[str, ...] = ("UP", "SHIFT_TAB")
DOWN_KEYS: tuple[str, ...] = ("DOWN", "TAB")


def is_query_char(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class PickerKeyHandler:
    """Bind picker keys to a model and launch actions."""

    def __init__(self, model: SelectionModel, actions: PickerKeyActions) -> None:
        self.model = model
        self.actions = actions
        self._exit: PickerExit | None = None
        self.registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(QUIT_KEYS, self._quit),
            KeyComboBinding(CONFIRM_KEYS, self._confirm),
            KeyComboBinding(UP_KEYS, lambda: model.move_highlight(-1)),
            KeyComboBinding(DOWN_KEYS, lambda: model.move_highlight(1)),
            KeyComboBinding(("SHIFT_UP",), lambda: model.scroll_status(-1)),
            KeyComboBinding(("SHIFT_DOWN",), lambda: model.scroll_status(1)),
            KeyComboBinding(("CTRL_O",), lambda: self._launch(actions.open_file_manager)),
            KeyComboBinding(("CTRL_T",), lambda: self._launch(actions.open_terminal)),
            KeyComboBinding(("CTRL_B",), lambda: self._launch(actions.open_in_browser)),
            KeyComboBinding(("CTRL_G",), model.refresh_status),
            KeyComboBinding(("BACKSPACE",), model.delete_query_char),
        )

    def _quit(self) -> bool:
        self._exit = PickerExit(selection=None)
        return True

    def _confirm(self) -> bool:
        selected = self.model.highlighted
        if selected is None:
            return False
        self._exit = PickerExit(selection=selected)
        return True

    def _launch(self, action: Callable[[Repository], None]) -> bool:
        selected = self.model.highlighted
        if selected is None:
            return False
        action(selected)
        return False

    def handle_key(self, key: str) -> PickerExit | None:
        """Process one key; return a ``PickerExit`` when the session should end."""
        self._exit = None
        if key in self.registry:
            self.registry.dispatch(key)
        elif is_query_char(key):
            self.model.append_query_char(key)
        return self._exit


def dispatch_event(
    event: PickerEvent,
    model: SelectionModel,
    key_handler: PickerKeyHandler,
) -> PickerExit | None:
    """Route one loop event to the key handler or the model."""
    if isinstance(event, KeyPressed):
        return key_handler.handle_key(event.key)
    model.handle_event(event)
    return None
