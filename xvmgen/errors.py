"""
Error taxonomy for binding generation.

Every stage of the pipeline fails fast with one of these exceptions. The
context attributes (function, argument, position, raw type) point back to
the entry of the metadata document that has to be fixed.
"""

from typing import Optional


class XvmGenError(Exception):
    """Base class for all generation errors."""

    def __init__(
        self,
        message: str,
        function: Optional[str] = None,
        argument: Optional[str] = None,
        position: Optional[int] = None,
        raw_type: Optional[str] = None,
    ):
        self.message = message
        self.function = function
        self.argument = argument
        self.position = position
        self.raw_type = raw_type
        super().__init__(self._format())

    def _format(self) -> str:
        location = []
        if self.function is not None:
            location.append(f'function "{self.function}"')
        if self.argument is not None or self.position is not None:
            label = self.argument or '<unnamed>'
            if self.position is not None:
                label = f'{label} (#{self.position})'
            location.append(f'argument {label}')
        if self.raw_type is not None:
            location.append(f'type "{self.raw_type}"')
        if location:
            return f'{self.message} [{", ".join(location)}]'
        return self.message


class MalformedDocument(XvmGenError):
    """The metadata document is not valid structured data or lacks a required field."""


class UnsupportedType(XvmGenError):
    """A raw type cannot be parsed into a TypeDescriptor."""


class UnmappedType(XvmGenError):
    """A valid TypeDescriptor has no mapping for the active translation mode."""


class DuplicateSelector(XvmGenError):
    """Two exported functions resolve to the same selector."""


class RenderError(XvmGenError):
    """A template substitution point could not be resolved."""
