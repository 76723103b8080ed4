"""
Direction-agnostic type descriptors.

A TypeDescriptor is a tagged value: exactly one TypeKind is active and only
the fields belonging to that kind are set. Descriptors are frozen so that
structurally equal types compare and hash equal, which is what the renderer
relies on to emit each encoder once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


# =============================================================================
# TYPE KINDS
# =============================================================================

class TypeKind(Enum):
    """The variants a TypeDescriptor can take."""
    BOOL = 'bool'
    ADDRESS = 'address'
    FIXED_BYTES = 'fixed_bytes'
    DYNAMIC_BYTES = 'dynamic_bytes'
    STRING = 'string'
    UNSIGNED_INT = 'unsigned_int'
    SIGNED_INT = 'signed_int'
    FIXED_ARRAY = 'fixed_array'
    DYNAMIC_ARRAY = 'dynamic_array'


INTEGER_KINDS = (TypeKind.UNSIGNED_INT, TypeKind.SIGNED_INT)
ARRAY_KINDS = (TypeKind.FIXED_ARRAY, TypeKind.DYNAMIC_ARRAY)

# Native Rust integer widths; anything wider travels as U256
RUST_INTEGER_WIDTHS = (8, 16, 32, 64, 128)

ADDRESS_BYTES = 20
MAX_FIXED_BYTES = 32
MAX_INTEGER_WIDTH = 256


# =============================================================================
# DESCRIPTOR
# =============================================================================

@dataclass(frozen=True)
class TypeDescriptor:
    """Canonical representation of a contract argument or return type."""
    kind: TypeKind
    width: Optional[int] = None  # bits for integers, bytes for FIXED_BYTES
    length: Optional[int] = None  # FIXED_ARRAY only
    element: Optional['TypeDescriptor'] = None  # array kinds only

    def __post_init__(self):
        if self.kind in INTEGER_KINDS:
            if self.width is None or self.width % 8 or not 8 <= self.width <= MAX_INTEGER_WIDTH:
                raise ValueError(f'invalid integer width {self.width!r}')
        elif self.kind == TypeKind.FIXED_BYTES:
            if self.width is None or not 1 <= self.width <= MAX_FIXED_BYTES:
                raise ValueError(f'invalid fixed bytes width {self.width!r}')
        elif self.width is not None:
            raise ValueError(f'{self.kind.value} does not take a width')

        if self.kind in ARRAY_KINDS:
            if self.element is None:
                raise ValueError(f'{self.kind.value} requires an element type')
        elif self.element is not None:
            raise ValueError(f'{self.kind.value} does not take an element type')

        if self.kind == TypeKind.FIXED_ARRAY:
            if self.length is None or self.length < 0:
                raise ValueError(f'invalid fixed array length {self.length!r}')
        elif self.length is not None:
            raise ValueError(f'{self.kind.value} does not take a length')

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def boolean(cls) -> 'TypeDescriptor':
        return cls(TypeKind.BOOL)

    @classmethod
    def address(cls) -> 'TypeDescriptor':
        return cls(TypeKind.ADDRESS)

    @classmethod
    def fixed_bytes(cls, width: int) -> 'TypeDescriptor':
        return cls(TypeKind.FIXED_BYTES, width=width)

    @classmethod
    def dynamic_bytes(cls) -> 'TypeDescriptor':
        return cls(TypeKind.DYNAMIC_BYTES)

    @classmethod
    def string(cls) -> 'TypeDescriptor':
        return cls(TypeKind.STRING)

    @classmethod
    def unsigned(cls, width: int = 256) -> 'TypeDescriptor':
        return cls(TypeKind.UNSIGNED_INT, width=width)

    @classmethod
    def signed(cls, width: int = 256) -> 'TypeDescriptor':
        return cls(TypeKind.SIGNED_INT, width=width)

    @classmethod
    def fixed_array(cls, element: 'TypeDescriptor', length: int) -> 'TypeDescriptor':
        return cls(TypeKind.FIXED_ARRAY, length=length, element=element)

    @classmethod
    def dynamic_array(cls, element: 'TypeDescriptor') -> 'TypeDescriptor':
        return cls(TypeKind.DYNAMIC_ARRAY, element=element)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def is_dynamic(self) -> bool:
        """True if the encoded size depends on the value."""
        if self.kind in (TypeKind.DYNAMIC_BYTES, TypeKind.STRING, TypeKind.DYNAMIC_ARRAY):
            return True
        if self.kind == TypeKind.FIXED_ARRAY:
            return self.element.is_dynamic
        return False

    def walk(self) -> Iterator['TypeDescriptor']:
        """Yield this descriptor and all nested ones, elements before containers."""
        if self.element is not None:
            yield from self.element.walk()
        yield self

    # =========================================================================
    # NAMING
    # =========================================================================

    def evm_name(self) -> str:
        """Canonical Solidity ABI name, as used in function signatures."""
        kind = self.kind
        if kind == TypeKind.BOOL:
            return 'bool'
        if kind == TypeKind.ADDRESS:
            return 'address'
        if kind == TypeKind.FIXED_BYTES:
            return f'bytes{self.width}'
        if kind == TypeKind.DYNAMIC_BYTES:
            return 'bytes'
        if kind == TypeKind.STRING:
            return 'string'
        if kind == TypeKind.UNSIGNED_INT:
            return f'uint{self.width}'
        if kind == TypeKind.SIGNED_INT:
            return f'int{self.width}'
        if kind == TypeKind.FIXED_ARRAY:
            return f'{self.element.evm_name()}[{self.length}]'
        return f'{self.element.evm_name()}[]'

    def rust_name(self) -> str:
        """Canonical ink!/Rust name, as shown in ink! metadata."""
        kind = self.kind
        if kind == TypeKind.BOOL:
            return 'bool'
        if kind == TypeKind.ADDRESS:
            return 'H160'
        if kind == TypeKind.FIXED_BYTES:
            return f'[u8; {self.width}]'
        if kind == TypeKind.DYNAMIC_BYTES:
            return 'Vec<u8>'
        if kind == TypeKind.STRING:
            return 'String'
        if kind == TypeKind.UNSIGNED_INT:
            return f'u{self.width}'
        if kind == TypeKind.SIGNED_INT:
            return f'i{self.width}'
        if kind == TypeKind.FIXED_ARRAY:
            return f'[{self.element.rust_name()}; {self.length}]'
        return f'Vec<{self.element.rust_name()}>'

    @property
    def ident(self) -> str:
        """Identifier-safe name, e.g. uint256[3][] -> uint256_array3_array."""
        if self.kind == TypeKind.FIXED_ARRAY:
            return f'{self.element.ident}_array{self.length}'
        if self.kind == TypeKind.DYNAMIC_ARRAY:
            return f'{self.element.ident}_array'
        return self.evm_name()

    def __str__(self) -> str:
        return self.evm_name()
