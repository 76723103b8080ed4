"""
Type mappings from TypeDescriptors to target-language code fragments.

Each translation direction has one TypeMapper. For every descriptor it
produces a CodeFragment: how the type is declared in the generated source,
which parameter modifier it needs, and the source of the encoder function
that serializes a value into the wire layout the bridge call expects.

    EVM -> ink!   values are turned into ethabi Tokens (Ethereum ABI)
    ink! -> EVM   values are turned into SCALE bytes by Solidity helpers
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from ..errors import UnmappedType
from .descriptors import RUST_INTEGER_WIDTHS, TypeDescriptor, TypeKind


# =============================================================================
# CODE FRAGMENT
# =============================================================================

@dataclass(frozen=True)
class CodeFragment:
    """Target-language code for one TypeDescriptor."""
    reference: str  # Type as written in declarations, e.g. 'Vec<u8>' or 'uint32[]'
    modifier: str = ''  # Parameter passing modifier, e.g. 'memory'
    encoder_name: str = ''
    definition: str = ''  # Source of the encoder function
    support: Tuple[str, ...] = ()  # Shared support routines the encoder calls


# =============================================================================
# BASE MAPPER
# =============================================================================

class TypeMapper:
    """
    Maps TypeDescriptors to CodeFragments for one target language.

    Subclasses implement one ``map_*`` method per TypeKind. Fragments are
    memoised per descriptor, so each encoder is built once per run.
    """

    target = ''
    support_routines: Dict[str, str] = {}
    support_dependencies: Dict[str, Tuple[str, ...]] = {}

    def __init__(self):
        self._fragments: Dict[TypeDescriptor, CodeFragment] = {}

    def fragment(self, descriptor: TypeDescriptor) -> CodeFragment:
        """
        Get the CodeFragment of a descriptor.

        Raises:
            UnmappedType: If the descriptor (or a nested one) has no mapping
        """
        if descriptor not in self._fragments:
            self._fragments[descriptor] = self._build(descriptor)
        return self._fragments[descriptor]

    def _build(self, descriptor: TypeDescriptor) -> CodeFragment:
        kind = descriptor.kind
        if kind == TypeKind.BOOL:
            return self.map_bool(descriptor)
        elif kind == TypeKind.ADDRESS:
            return self.map_address(descriptor)
        elif kind == TypeKind.FIXED_BYTES:
            return self.map_fixed_bytes(descriptor)
        elif kind == TypeKind.DYNAMIC_BYTES:
            return self.map_dynamic_bytes(descriptor)
        elif kind == TypeKind.STRING:
            return self.map_string(descriptor)
        elif kind == TypeKind.UNSIGNED_INT:
            return self.map_unsigned(descriptor)
        elif kind == TypeKind.SIGNED_INT:
            return self.map_signed(descriptor)
        elif kind == TypeKind.FIXED_ARRAY:
            return self.map_fixed_array(descriptor)
        elif kind == TypeKind.DYNAMIC_ARRAY:
            return self.map_dynamic_array(descriptor)
        raise self.unmapped(descriptor, f'unknown type kind {kind!r}')

    def unmapped(self, descriptor: TypeDescriptor, reason: str) -> UnmappedType:
        return UnmappedType(f'no {self.target} mapping: {reason}', raw_type=str(descriptor))

    def check(self, descriptor: TypeDescriptor) -> None:
        """Ensure the descriptor and every nested descriptor are mapped."""
        for nested in descriptor.walk():
            self.fragment(nested)

    # =========================================================================
    # FILTERS
    # =========================================================================

    def type_reference(self, descriptor: TypeDescriptor) -> str:
        return self.fragment(descriptor).reference

    def type_modifier(self, descriptor: TypeDescriptor) -> str:
        return self.fragment(descriptor).modifier

    def encoder_definition(self, descriptor: TypeDescriptor) -> str:
        return self.fragment(descriptor).definition

    def encoder_call(self, descriptor: TypeDescriptor, expr: str) -> str:
        raise NotImplementedError

    def declare(self, descriptor: TypeDescriptor, name: str) -> str:
        raise NotImplementedError

    def helper_names(self, descriptors: Iterable[TypeDescriptor]) -> Tuple[str, ...]:
        """Names of the encoders and support routines emitted for the given types."""
        names = [self.fragment(descriptor).encoder_name for descriptor in descriptors]
        return tuple(names) + tuple(self.support_routines)

    def support_definitions(self, names: Iterable[str]) -> List[str]:
        """
        Get the sources of the named support routines and of the routines
        they depend on, in a fixed order.
        """
        needed = set()
        pending = list(names)
        while pending:
            name = pending.pop()
            if name in needed:
                continue
            if name not in self.support_routines:
                raise UnmappedType(f'unknown {self.target} support routine "{name}"')
            needed.add(name)
            pending.extend(self.support_dependencies.get(name, ()))
        return [source for name, source in self.support_routines.items() if name in needed]

    # =========================================================================
    # PER-KIND MAPPINGS
    # =========================================================================

    def map_bool(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'bool')

    def map_address(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'address')

    def map_fixed_bytes(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'fixed bytes')

    def map_dynamic_bytes(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'bytes')

    def map_string(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'string')

    def map_unsigned(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'unsigned integer')

    def map_signed(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'signed integer')

    def map_fixed_array(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'fixed array')

    def map_dynamic_array(self, descriptor: TypeDescriptor) -> CodeFragment:
        raise self.unmapped(descriptor, 'dynamic array')


def encoder_name(descriptor: TypeDescriptor) -> str:
    return f'encode_{descriptor.ident}'


# =============================================================================
# EVM -> INK! (ethabi tokens)
# =============================================================================

_RUST_ENCODER = '''fn {name}(value: {reference}) -> Token {{
    {body}
}}'''

_RUST_SIGNED_BODY = '''let value = value as i128;
    if value < 0 {
        Token::Int(!U256::from((-(value + 1)) as u128))
    } else {
        Token::Int(U256::from(value as u128))
    }'''


class InkTypeMapper(TypeMapper):
    """
    Maps descriptors to Rust types for an ink! module calling into the EVM.

    Every encoder is an associated function returning an ``ethabi::Token``;
    the tokens of a call are ABI encoded together behind the selector.
    Integers wider than 128 bits travel as ``U256`` (signed ones as the
    two's complement word).
    """

    target = 'ink!'

    def encoder_call(self, descriptor: TypeDescriptor, expr: str) -> str:
        return f'Self::{self.fragment(descriptor).encoder_name}({expr})'

    def declare(self, descriptor: TypeDescriptor, name: str) -> str:
        return f'{name}: {self.type_reference(descriptor)}'

    def _encoder(self, descriptor: TypeDescriptor, reference: str, body: str) -> CodeFragment:
        name = encoder_name(descriptor)
        return CodeFragment(
            reference=reference,
            encoder_name=name,
            definition=_RUST_ENCODER.format(name=name, reference=reference, body=body),
        )

    def map_bool(self, descriptor):
        return self._encoder(descriptor, 'bool', 'Token::Bool(value)')

    def map_address(self, descriptor):
        return self._encoder(descriptor, 'H160', 'Token::Address(value)')

    def map_fixed_bytes(self, descriptor):
        return self._encoder(descriptor, f'[u8; {descriptor.width}]', 'Token::FixedBytes(value.to_vec())')

    def map_dynamic_bytes(self, descriptor):
        return self._encoder(descriptor, 'Vec<u8>', 'Token::Bytes(value)')

    def map_string(self, descriptor):
        return self._encoder(descriptor, 'String', 'Token::String(value)')

    def map_unsigned(self, descriptor):
        width = _native_width(descriptor.width)
        if width is None:
            return self._encoder(descriptor, 'U256', 'Token::Uint(value)')
        return self._encoder(descriptor, f'u{width}', 'Token::Uint(U256::from(value))')

    def map_signed(self, descriptor):
        width = _native_width(descriptor.width)
        if width is None:
            return self._encoder(descriptor, 'U256', 'Token::Int(value)')
        return self._encoder(descriptor, f'i{width}', _RUST_SIGNED_BODY)

    def map_fixed_array(self, descriptor):
        element = self.fragment(descriptor.element)
        return self._encoder(
            descriptor,
            f'[{element.reference}; {descriptor.length}]',
            f'Token::FixedArray(value.into_iter().map(Self::{element.encoder_name}).collect())',
        )

    def map_dynamic_array(self, descriptor):
        element = self.fragment(descriptor.element)
        return self._encoder(
            descriptor,
            f'Vec<{element.reference}>',
            f'Token::Array(value.into_iter().map(Self::{element.encoder_name}).collect())',
        )


def _native_width(width: int):
    """Smallest native Rust integer width holding ``width`` bits, or None."""
    for native in RUST_INTEGER_WIDTHS:
        if width <= native:
            return native
    return None


# =============================================================================
# INK! -> EVM (SCALE encoding in Solidity)
# =============================================================================

_SOL_ENCODER = '''function {name}({declaration}) internal pure returns (bytes memory) {{
    {body}
}}'''

_SOL_ARRAY_ENCODER = '''function {name}({declaration}) internal pure returns (bytes memory encoded) {{
    {prefix}for (uint256 i = 0; i < value.length; i++) {{
        encoded = abi.encodePacked(encoded, {element_call});
    }}
}}'''

_SCALE_LE = '''function scale_le(uint256 value, uint256 size) internal pure returns (bytes memory encoded) {
    encoded = new bytes(size);
    for (uint256 i = 0; i < size; i++) {
        encoded[i] = bytes1(uint8(value >> (8 * i)));
    }
}'''

_SCALE_COMPACT_LENGTH = '''function scale_compact_length(uint256 value) internal pure returns (bytes memory) {
    if (value < 1 << 6) {
        return scale_le(value << 2, 1);
    }
    if (value < 1 << 14) {
        return scale_le((value << 2) | 1, 2);
    }
    if (value < 1 << 30) {
        return scale_le((value << 2) | 2, 4);
    }
    uint256 size = 4;
    while (size < 32 && value >> (8 * size) != 0) {
        size++;
    }
    return abi.encodePacked(uint8(((size - 4) << 2) | 3), scale_le(value, size));
}'''

SCALE_LE = 'scale_le'
SCALE_COMPACT_LENGTH = 'scale_compact_length'


class SolidityTypeMapper(TypeMapper):
    """
    Maps descriptors to Solidity types for a contract calling into ink!.

    Encoders produce SCALE bytes: little-endian fixed width integers (two's
    complement for signed ones), a single byte for bool, raw bytes for
    addresses and fixed bytes, and a compact length prefix in front of
    bytes, strings and dynamic arrays. Fixed arrays carry no prefix.
    """

    target = 'Solidity'
    support_routines = {
        SCALE_LE: _SCALE_LE,
        SCALE_COMPACT_LENGTH: _SCALE_COMPACT_LENGTH,
    }
    support_dependencies = {
        SCALE_COMPACT_LENGTH: (SCALE_LE,),
    }

    def encoder_call(self, descriptor: TypeDescriptor, expr: str) -> str:
        return f'{self.fragment(descriptor).encoder_name}({expr})'

    def declare(self, descriptor: TypeDescriptor, name: str) -> str:
        fragment = self.fragment(descriptor)
        if fragment.modifier:
            return f'{fragment.reference} {fragment.modifier} {name}'
        return f'{fragment.reference} {name}'

    def _encoder(
        self,
        descriptor: TypeDescriptor,
        reference: str,
        body: str,
        modifier: str = '',
        support: Tuple[str, ...] = (),
    ) -> CodeFragment:
        name = encoder_name(descriptor)
        declaration = f'{reference} {modifier} value' if modifier else f'{reference} value'
        return CodeFragment(
            reference=reference,
            modifier=modifier,
            encoder_name=name,
            definition=_SOL_ENCODER.format(name=name, declaration=declaration, body=body),
            support=support,
        )

    def map_bool(self, descriptor):
        return self._encoder(descriptor, 'bool', 'return abi.encodePacked(value);')

    def map_address(self, descriptor):
        return self._encoder(descriptor, 'address', 'return abi.encodePacked(value);')

    def map_fixed_bytes(self, descriptor):
        return self._encoder(descriptor, f'bytes{descriptor.width}', 'return abi.encodePacked(value);')

    def map_dynamic_bytes(self, descriptor):
        return self._encoder(
            descriptor, 'bytes',
            'return abi.encodePacked(scale_compact_length(value.length), value);',
            modifier='memory', support=(SCALE_COMPACT_LENGTH,),
        )

    def map_string(self, descriptor):
        return self._encoder(
            descriptor, 'string',
            'return abi.encodePacked(scale_compact_length(bytes(value).length), bytes(value));',
            modifier='memory', support=(SCALE_COMPACT_LENGTH,),
        )

    def map_unsigned(self, descriptor):
        return self._encoder(
            descriptor, f'uint{descriptor.width}',
            f'return scale_le(uint256(value), {descriptor.width // 8});',
            support=(SCALE_LE,),
        )

    def map_signed(self, descriptor):
        return self._encoder(
            descriptor, f'int{descriptor.width}',
            f'return scale_le(uint256(int256(value)), {descriptor.width // 8});',
            support=(SCALE_LE,),
        )

    def map_fixed_array(self, descriptor):
        if descriptor.length == 0:
            raise self.unmapped(descriptor, 'zero-length arrays do not exist in Solidity')
        return self._array(descriptor, f'[{descriptor.length}]', prefix='', support=())

    def map_dynamic_array(self, descriptor):
        return self._array(
            descriptor, '[]',
            prefix='encoded = scale_compact_length(value.length);\n    ',
            support=(SCALE_COMPACT_LENGTH,),
        )

    def _array(self, descriptor, suffix: str, prefix: str, support: Tuple[str, ...]) -> CodeFragment:
        element = self.fragment(descriptor.element)
        reference = f'{element.reference}{suffix}'
        name = encoder_name(descriptor)
        return CodeFragment(
            reference=reference,
            modifier='memory',
            encoder_name=name,
            definition=_SOL_ARRAY_ENCODER.format(
                name=name,
                declaration=f'{reference} memory value',
                prefix=prefix,
                element_call=self.encoder_call(descriptor.element, 'value[i]'),
            ),
            support=support,
        )
