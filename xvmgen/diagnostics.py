"""
Diagnostic/notice system for binding generation.

Collects the deliberate drops and degradations made while reading a
metadata document (events, read-only functions, return values that are
not forwarded) so that users can see what the generated proxy leaves out.
Nothing recorded here is an error; errors are raised from xvmgen.errors.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import List


class DiagnosticSeverity(Enum):
    """Severity levels for generator diagnostics."""
    WARNING = 'warning'
    INFO = 'info'


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    severity: DiagnosticSeverity
    code: str
    message: str
    location: str = ''  # e.g. 'transfer(address,uint256)' or 'entry #3'
    construct: str = ''  # e.g. 'event', 'read-only function'

    def __str__(self) -> str:
        if self.location:
            return f'[{self.severity.value}] {self.location}: {self.message} ({self.code})'
        return f'[{self.severity.value}] {self.message} ({self.code})'


class GeneratorDiagnostics:
    """
    Collects generator notices during parsing and rendering.

    Usage:
        diag = GeneratorDiagnostics()
        diag.info_event_dropped("Transfer", "entry #4")
        # ... after generation ...
        diag.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self._diagnostics: List[Diagnostic] = []
        self._verbose = verbose

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        """Get only warning-level diagnostics."""
        return [d for d in self._diagnostics if d.severity == DiagnosticSeverity.WARNING]

    # =========================================================================
    # SPECIFIC NOTICES
    # =========================================================================

    def info_event_dropped(self, name: str, location: str = '') -> None:
        """Note that an event entry was dropped."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I001',
            message=f'Event "{name}" was dropped (events are not bridged).',
            location=location,
            construct='event',
        ))

    def info_read_only_dropped(self, name: str, location: str = '') -> None:
        """Note that a non-mutating function was dropped."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I002',
            message=f'Read-only function "{name}" was dropped '
                    f'(bridge calls cannot return values).',
            location=location,
            construct='read-only function',
        ))

    def info_entry_skipped(self, kind: str, location: str = '') -> None:
        """Note that a non-callable entry (constructor, fallback, ...) was skipped."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I003',
            message=f'{kind} entry was skipped (not callable through the bridge).',
            location=location,
            construct=kind,
        ))

    def info_payable_not_forwarded(self, name: str, location: str = '') -> None:
        """Note that a payable function is marked but value is not forwarded."""
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFO,
            code='I004',
            message=f'Function "{name}" is payable; attached value is not forwarded.',
            location=location,
            construct='payable',
        ))

    def warn_return_not_representable(
        self,
        name: str,
        detail: str = '',
        location: str = '',
    ) -> None:
        """Warn that a return type has no descriptor and is recorded as none."""
        msg = f'Return type of "{name}" cannot be represented and is ignored'
        if detail:
            msg += f' ({detail})'
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code='W001',
            message=msg,
            location=location,
            construct='return type',
        ))

    # =========================================================================
    # REPORTING
    # =========================================================================

    def print_summary(self, file=None) -> None:
        """Print a summary of all diagnostics to stderr (or specified file)."""
        if file is None:
            file = sys.stderr

        if not self._diagnostics:
            return

        warnings = self.warnings
        infos = [d for d in self._diagnostics if d.severity == DiagnosticSeverity.INFO]

        if warnings:
            print(f'\nGenerator warnings ({len(warnings)}):', file=file)
            for w in warnings:
                print(f'  {w}', file=file)

        if infos:
            by_construct: dict = {}
            for d in infos:
                by_construct.setdefault(d.construct or 'other', []).append(d)
            print(f'\nSkipped or marked entries ({len(infos)}):', file=file)
            for construct, diags in sorted(by_construct.items()):
                print(f'  {construct}: {len(diags)} occurrence(s)', file=file)
                if self._verbose:
                    for d in diags:
                        print(f'    {d}', file=file)

    def get_summary(self) -> str:
        """Get a one-line summary of all diagnostics."""
        if not self._diagnostics:
            return 'No generator notices.'

        by_construct: dict = {}
        for d in self._diagnostics:
            key = d.construct or 'other'
            by_construct[key] = by_construct.get(key, 0) + 1

        parts = [f'{count} {name}' for name, count in sorted(by_construct.items())]
        return f'Generator notices: {", ".join(parts)}'
