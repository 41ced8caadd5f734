"""Delivering a command into the user's shell without running it.

Each InjectionMethod has one delivery class with a ``deliver(text)`` method.
GUI paste and multiplexer deliveries raise InjectionBackendUnavailable when
the platform lets them down; ``CommandInjector.inject`` turns that into the
interactive fallback, so the user always ends up with the command in hand.
"""

import time
from dataclasses import dataclass, replace
from typing import Callable, Optional

from ..constants import CLIPBOARD_SETTLE_SECONDS, DEFAULT_PASTE_RESTORE_DELAY_MS
from ..errors import InjectionBackendUnavailable
from ..utils.logging import logger
from ..utils.prompts import Prompter
from .clipboard import ClipboardSnapshot, select_clipboard_backend
from .keys import select_paste_keystroke
from .probe import (
    INTERACTIVE_FALLBACK, EnvironmentSnapshot, InjectionKind, InjectionMethod, Multiplexer
)
from .tools import run_tool


@dataclass(frozen=True)
class DeliveryOutcome:
    """What happened to a command handed to the injector.

    ``accepted_text`` is only set by the interactive fallback: the command the
    user confirmed, possibly edited. None there means the user cancelled.
    """
    method: InjectionMethod
    accepted_text: Optional[str] = None
    downgraded_from: Optional[InjectionMethod] = None
    downgrade_reason: Optional[str] = None

    @property
    def handed_off(self) -> bool:
        return self.method.hands_off

    @property
    def cancelled(self) -> bool:
        return not self.handed_off and self.accepted_text is None


def prepare_text(text: str) -> str:
    """Normalize line endings and drop the trailing newline a paste would submit."""
    return text.replace("\r\n", "\n").replace("\r", "").strip("\n")


def _require_single_line(text: str) -> None:
    # A typed or pasted newline is an Enter key press
    if "\n" in text:
        raise InjectionBackendUnavailable("multi-line text would run on delivery")


class GuiPasteDelivery:
    """Clipboard + synthetic paste keystroke into the focused terminal."""

    def __init__(self,
                 environment: EnvironmentSnapshot,
                 restore_delay: float,
                 sleep: Callable[[float], None] = time.sleep):
        self.environment = environment
        self.restore_delay = restore_delay
        self._sleep = sleep

    def deliver(self, text: str) -> DeliveryOutcome:
        _require_single_line(text)
        backend = select_clipboard_backend(self.environment)
        keystroke = select_paste_keystroke(self.environment)

        with ClipboardSnapshot(backend, self.restore_delay, self._sleep) as clipboard:
            clipboard.write(text)
            self._sleep(CLIPBOARD_SETTLE_SECONDS)
            keystroke.send()
            clipboard.mark_pasted()

        logger.delivery(f"Pasted command into the terminal via {backend.name} + {keystroke.name}")
        return DeliveryOutcome(InjectionMethod(InjectionKind.GUI_PASTE))


def escape_for_screen(text: str) -> str:
    """Neutralize the escapes screen's ``stuff`` command interprets."""
    return text.replace("\\", "\\\\").replace("^", "\\^")


class MultiplexerDelivery:
    """Types the command into the current tmux pane or screen window."""

    def __init__(self, method: InjectionMethod):
        self.method = method

    def deliver(self, text: str) -> DeliveryOutcome:
        _require_single_line(text)

        if self.method.multiplexer is Multiplexer.TMUX:
            args = ["tmux", "send-keys"]
            if self.method.target:
                args += ["-t", self.method.target]
            args += ["-l", "--", text]
        else:
            args = ["screen"]
            if self.method.target:
                args += ["-S", self.method.target]
            args += ["-X", "stuff", escape_for_screen(text)]

        run_tool(args)
        logger.delivery(f"Typed command into {self.method.name}")
        return DeliveryOutcome(self.method)


class InteractiveDelivery:
    """Shows the command and lets the user edit or confirm it in-process."""

    def __init__(self, prompter: Prompter):
        self.prompter = prompter

    def deliver(self, text: str) -> DeliveryOutcome:
        self.prompter.show(text)
        accepted = self.prompter.edit("> ", text)
        if accepted is None:
            logger.user("Command dismissed.")
        return DeliveryOutcome(INTERACTIVE_FALLBACK, accepted_text=accepted)


class CommandInjector:
    """Delivers finalized command text using a given InjectionMethod."""

    def __init__(self,
                 environment: EnvironmentSnapshot,
                 prompter: Prompter,
                 restore_delay_ms: int = DEFAULT_PASTE_RESTORE_DELAY_MS,
                 sleep: Callable[[float], None] = time.sleep):
        self.environment = environment
        self.prompter = prompter
        self.restore_delay = restore_delay_ms / 1000.0
        self._sleep = sleep

    def delivery_for(self, method: InjectionMethod):
        """The delivery object implementing *method*."""
        if method.kind is InjectionKind.GUI_PASTE:
            return GuiPasteDelivery(self.environment, self.restore_delay, self._sleep)
        if method.kind is InjectionKind.MULTIPLEXER_SEND_KEYS:
            return MultiplexerDelivery(method)
        return InteractiveDelivery(self.prompter)

    def inject(self, text: str, method: InjectionMethod) -> DeliveryOutcome:
        """Deliver *text* with *method*, downgrading to the interactive fallback on failure."""
        text = prepare_text(text)
        logger.debug(f"Delivering via {method.name}: {text}")

        try:
            return self.delivery_for(method).deliver(text)
        except InjectionBackendUnavailable as e:
            if method.kind is InjectionKind.INTERACTIVE_FALLBACK:
                raise
            logger.warning(f"{method.name} delivery unavailable ({e}); falling back to interactive prompt.")
            outcome = InteractiveDelivery(self.prompter).deliver(text)
            return replace(outcome, downgraded_from=method, downgrade_reason=str(e))


def create_injector(environment: EnvironmentSnapshot,
                    prompter: Prompter,
                    restore_delay_ms: int = DEFAULT_PASTE_RESTORE_DELAY_MS) -> CommandInjector:
    """Create a command injector for *environment*."""
    return CommandInjector(environment, prompter, restore_delay_ms)
