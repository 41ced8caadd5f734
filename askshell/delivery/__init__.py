"""Environment probing and command delivery for askshell."""

from .clipboard import ClipboardBackend, ClipboardSnapshot, select_clipboard_backend
from .injector import CommandInjector, DeliveryOutcome, create_injector
from .probe import (
    EnvironmentSnapshot,
    InjectionKind,
    InjectionMethod,
    Multiplexer,
    probe_environment,
    select_injection_method,
)

__all__ = [
    "ClipboardBackend",
    "ClipboardSnapshot",
    "select_clipboard_backend",
    "CommandInjector",
    "DeliveryOutcome",
    "create_injector",
    "EnvironmentSnapshot",
    "InjectionKind",
    "InjectionMethod",
    "Multiplexer",
    "probe_environment",
    "select_injection_method",
]
