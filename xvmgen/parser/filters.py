"""
Drop rules applied to metadata entries before they become FunctionSpecs.

Only mutating functions can be proxied: the bridge call carries no return
value back, so read-only functions are useless on the other side, and events
have no callable counterpart. These rules are deliberate filtering, reported
as diagnostics rather than errors.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..diagnostics import GeneratorDiagnostics


FUNCTION = 'function'
EVENT = 'event'


@dataclass(frozen=True)
class RawEntry:
    """A metadata entry classified by kind, before any type parsing."""
    kind: str  # 'function', 'event', 'constructor', 'fallback', ...
    name: str
    mutates: bool
    location: str = ''
    payload: dict = field(default_factory=dict, compare=False, hash=False)


def is_event(entry: RawEntry) -> bool:
    return entry.kind == EVENT


def is_read_only(entry: RawEntry) -> bool:
    return entry.kind == FUNCTION and not entry.mutates


def is_proxied(entry: RawEntry) -> bool:
    """True if the entry becomes a callable entry point in the output."""
    return entry.kind == FUNCTION and entry.mutates


class EntryFilter:
    """Applies the drop rules once and reports every dropped entry."""

    def __init__(self, diagnostics: Optional[GeneratorDiagnostics] = None):
        self._diagnostics = diagnostics or GeneratorDiagnostics()

    def accept(self, entry: RawEntry) -> bool:
        if is_proxied(entry):
            return True
        if is_event(entry):
            self._diagnostics.info_event_dropped(entry.name, entry.location)
        elif is_read_only(entry):
            self._diagnostics.info_read_only_dropped(entry.name, entry.location)
        else:
            self._diagnostics.info_entry_skipped(entry.kind, entry.location)
        return False

    def apply(self, entries: Iterable[RawEntry]) -> List[RawEntry]:
        return [entry for entry in entries if self.accept(entry)]
