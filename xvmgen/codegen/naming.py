"""
Identifier conversions for generated source.

Converts metadata names to the naming conventions of the target language:
- transferFrom -> transfer_from (Rust functions and modules)
- transferFrom -> TRANSFER_FROM (constants)
- my_token -> MyToken (Rust structs, Solidity contracts)

and escapes names that collide with reserved words.
"""

import re
from typing import Iterable, List, Optional, Set


RUST_KEYWORDS = frozenset({
    'as', 'async', 'await', 'break', 'const', 'continue', 'crate', 'dyn',
    'else', 'enum', 'extern', 'false', 'fn', 'for', 'if', 'impl', 'in',
    'let', 'loop', 'match', 'mod', 'move', 'mut', 'pub', 'ref', 'return',
    'self', 'Self', 'static', 'struct', 'super', 'trait', 'true', 'type',
    'unsafe', 'use', 'where', 'while', 'abstract', 'become', 'box', 'do',
    'final', 'macro', 'override', 'priv', 'try', 'typeof', 'unsized',
    'virtual', 'yield',
})

# Keywords that cannot be written as raw identifiers
RUST_NON_RAW_KEYWORDS = frozenset({'crate', 'self', 'Self', 'super'})

SOLIDITY_KEYWORDS = frozenset({
    'abstract', 'address', 'after', 'alias', 'anonymous', 'apply', 'as',
    'assembly', 'auto', 'bool', 'break', 'byte', 'bytes', 'calldata',
    'case', 'catch', 'constant', 'constructor', 'continue', 'contract',
    'copyof', 'default', 'define', 'delete', 'do', 'else', 'emit', 'enum',
    'error', 'event', 'external', 'fallback', 'false', 'final', 'for',
    'function', 'if', 'immutable', 'implements', 'import', 'in', 'indexed',
    'inline', 'int', 'interface', 'internal', 'is', 'let', 'library',
    'macro', 'mapping', 'match', 'memory', 'modifier', 'mutable', 'new',
    'null', 'of', 'override', 'partial', 'payable', 'pragma', 'private',
    'promise', 'public', 'pure', 'receive', 'reference', 'relocatable',
    'return', 'returns', 'sealed', 'sizeof', 'static', 'storage', 'string',
    'struct', 'super', 'supports', 'switch', 'this', 'throw', 'true', 'try',
    'type', 'typedef', 'typeof', 'uint', 'unchecked', 'unicode', 'using',
    'var', 'view', 'virtual', 'while',
})

# Denomination units, reserved like keywords
SOLIDITY_UNITS = frozenset({
    'wei', 'gwei', 'ether', 'seconds', 'minutes', 'hours', 'days', 'weeks',
    'years', 'finney', 'szabo',
})

# Global namespaces a parameter must not shadow
SOLIDITY_BUILTINS = frozenset({'abi', 'msg', 'block', 'tx'})

# Sized elementary type names: uint8, int256, bytes32, fixed128x18, ...
_SOLIDITY_SIZED_TYPE_RE = re.compile(r'^(u?int\d+|bytes\d+|u?fixed(\d+x\d+)?)$', re.ASCII)


# =============================================================================
# CASE CONVERSIONS
# =============================================================================

def split_words(name: str) -> List[str]:
    """
    Split a name into lower case words.

    Handles snake_case, SCREAMING_CASE, camelCase, PascalCase and acronyms
    (ERC20Token -> erc20, token). Trait paths such as ``PSP22::transfer``
    are split at the separator.
    """
    text = re.sub(r'[^0-9A-Za-z]+', '_', name)
    text = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', text)
    text = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', text)
    return [part.lower() for part in text.split('_') if part]


def to_snake_case(name: str) -> str:
    return '_'.join(split_words(name))


def to_upper_snake_case(name: str) -> str:
    return '_'.join(split_words(name)).upper()


def to_upper_camel_case(name: str) -> str:
    return ''.join(word.capitalize() for word in split_words(name))


def identifier(name: str) -> str:
    """Make any name a valid identifier without changing its case."""
    text = re.sub(r'[^0-9A-Za-z_]+', '_', name.replace('::', '_')).strip('_')
    if not text:
        return ''
    if text[0].isdigit():
        return f'_{text}'
    return text


# =============================================================================
# RESERVED WORDS
# =============================================================================

def escape_rust(name: str) -> str:
    if name in RUST_NON_RAW_KEYWORDS:
        return f'{name}_'
    if name in RUST_KEYWORDS:
        return f'r#{name}'
    return name


def escape_solidity(name: str) -> str:
    if (
        name in SOLIDITY_KEYWORDS
        or name in SOLIDITY_UNITS
        or name in SOLIDITY_BUILTINS
        or _SOLIDITY_SIZED_TYPE_RE.match(name)
    ):
        return f'{name}_'
    return name


class NameAllocator:
    """Hands out unique names within one scope."""

    def __init__(self, reserved: Optional[Iterable[str]] = None):
        self._taken: Set[str] = set(reserved or ())

    def allocate(self, name: str) -> str:
        """
        Reserve a name, suffixing it with _1, _2, ... if it is taken.

        Args:
            name: The preferred name

        Returns:
            The name that was actually reserved
        """
        candidate = name
        counter = 0
        while candidate in self._taken:
            counter += 1
            candidate = f'{name}_{counter}'
        self._taken.add(candidate)
        return candidate
