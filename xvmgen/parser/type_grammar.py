"""
Recursive parser for Solidity ABI type strings.

    type   := base suffix*
    base   := bool | address | string | bytes | bytes<N> | uint<N>? | int<N>?
    suffix := '[' ']' | '[' <N> ']'

Suffixes wrap the already parsed element type, so ``uint8[2][]`` is a
dynamic array of two-element arrays. Anything outside this grammar is
reported as UnsupportedType.
"""

import re
from typing import Optional

from ..errors import UnsupportedType
from ..type_system.descriptors import TypeDescriptor


_INTEGER_RE = re.compile(r'^(u?int)(\d*)$', re.ASCII)
_FIXED_BYTES_RE = re.compile(r'^bytes(\d+)$', re.ASCII)

# Constructs that are valid Solidity but outside the supported type set
_UNSUPPORTED_PREFIXES = {
    'mapping': 'mappings cannot be passed across the bridge',
    'tuple': 'structs and tuples are not supported',
    '(': 'structs and tuples are not supported',
    'function': 'function types are not supported',
    'fixed': 'fixed point numbers are not supported',
    'ufixed': 'fixed point numbers are not supported',
}


def parse_type(raw_type: str) -> TypeDescriptor:
    """
    Parse a Solidity ABI type string into a TypeDescriptor.

    Args:
        raw_type: The type as it appears in the ABI (e.g. 'uint256[]')

    Returns:
        The parsed descriptor

    Raises:
        UnsupportedType: If the string does not match the grammar
    """
    if not isinstance(raw_type, str):
        raise UnsupportedType(f'type must be a string, got {type(raw_type).__name__}')
    return _parse(raw_type.strip(), raw_type)


def _parse(text: str, raw_type: str) -> TypeDescriptor:
    if text.endswith(']'):
        open_index = text.rfind('[')
        if open_index <= 0:
            raise UnsupportedType('unbalanced array brackets', raw_type=raw_type)
        element = _parse(text[:open_index], raw_type)
        size = text[open_index + 1:-1].strip()
        if not size:
            return TypeDescriptor.dynamic_array(element)
        length = _parse_number(size)
        if length is None or length == 0:
            raise UnsupportedType(f'invalid array length "{size}"', raw_type=raw_type)
        return TypeDescriptor.fixed_array(element, length)
    return _parse_base(text, raw_type)


def _parse_base(text: str, raw_type: str) -> TypeDescriptor:
    for prefix, reason in _UNSUPPORTED_PREFIXES.items():
        if text.startswith(prefix):
            raise UnsupportedType(reason, raw_type=raw_type)

    if text == 'bool':
        return TypeDescriptor.boolean()
    if text == 'address':
        return TypeDescriptor.address()
    if text == 'string':
        return TypeDescriptor.string()
    if text == 'bytes':
        return TypeDescriptor.dynamic_bytes()

    match = _FIXED_BYTES_RE.match(text)
    if match:
        width = int(match.group(1))
        if not 1 <= width <= 32:
            raise UnsupportedType(f'invalid bytes width {width}', raw_type=raw_type)
        return TypeDescriptor.fixed_bytes(width)

    match = _INTEGER_RE.match(text)
    if match:
        keyword, digits = match.groups()
        width = int(digits) if digits else 256
        if width % 8 or not 8 <= width <= 256:
            raise UnsupportedType(f'invalid integer width {width}', raw_type=raw_type)
        if keyword == 'uint':
            return TypeDescriptor.unsigned(width)
        return TypeDescriptor.signed(width)

    raise UnsupportedType('unrecognized type keyword', raw_type=raw_type)


def _parse_number(text: str) -> Optional[int]:
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)
