"""
Selector calculation.

A selector is the 4-byte tag in front of an encoded call that tells the
callee which function to run. It is derived from the function's canonical
signature using the hashing convention of the system the function lives in:

    EVM    keccak256("transfer(address,uint256)")[0..4]
    ink!   blake2b_256("transfer")[0..4], unless the metadata declares one
"""

import hashlib
from dataclasses import dataclass
from typing import Callable, Dict

from eth_utils import keccak

from ..errors import DuplicateSelector
from ..parser.spec_nodes import ContractSpec, FunctionSpec
from ..type_system.descriptors import TypeDescriptor


SELECTOR_SIZE = 4


@dataclass(frozen=True)
class Selector:
    """A 4-byte function selector."""
    value: bytes

    def __post_init__(self):
        if len(self.value) != SELECTOR_SIZE:
            raise ValueError(f'selector must be {SELECTOR_SIZE} bytes, got {len(self.value)}')

    def hex(self) -> str:
        return self.value.hex()

    @property
    def as_int(self) -> int:
        return int.from_bytes(self.value, 'big')

    def __str__(self) -> str:
        return f'0x{self.hex()}'


def canonical_signature(
    function: FunctionSpec,
    naming: Callable[[TypeDescriptor], str] = TypeDescriptor.evm_name,
) -> str:
    """
    Build the canonical signature of a function.

    Args:
        function: The function
        naming: Gives the source system's canonical name of a type

    Returns:
        The signature, e.g. 'transfer(address,uint256)'
    """
    return f'{function.name}({",".join(naming(arg.type) for arg in function.arguments)})'


# =============================================================================
# CONVENTIONS
# =============================================================================

class SelectorConvention:
    """How the source system derives selectors."""

    def type_name(self, descriptor: TypeDescriptor) -> str:
        raise NotImplementedError

    def signature(self, function: FunctionSpec) -> str:
        return canonical_signature(function, self.type_name)

    def compute(self, function: FunctionSpec) -> Selector:
        raise NotImplementedError


class KeccakSelector(SelectorConvention):
    """Solidity: first 4 bytes of the Keccak-256 of the canonical signature."""

    def type_name(self, descriptor: TypeDescriptor) -> str:
        return descriptor.evm_name()

    def compute(self, function: FunctionSpec) -> Selector:
        return Selector(keccak(text=self.signature(function))[:SELECTOR_SIZE])


class Blake2Selector(SelectorConvention):
    """
    ink!: first 4 bytes of the BLAKE2b-256 of the message label.

    ink! lets a message override its selector, so a selector declared in
    the metadata always wins over the computed one.
    """

    def type_name(self, descriptor: TypeDescriptor) -> str:
        return descriptor.rust_name()

    def compute(self, function: FunctionSpec) -> Selector:
        if function.declared_selector is not None:
            return Selector(function.declared_selector)
        digest = hashlib.blake2b(function.name.encode('utf-8'), digest_size=32).digest()
        return Selector(digest[:SELECTOR_SIZE])


def compute_selectors(
    spec: ContractSpec,
    convention: SelectorConvention,
) -> Dict[FunctionSpec, Selector]:
    """
    Compute the selector of every function, in document order.

    Raises:
        DuplicateSelector: If two functions share a selector
    """
    selectors: Dict[FunctionSpec, Selector] = {}
    owners: Dict[Selector, FunctionSpec] = {}
    for function in spec.functions:
        selector = convention.compute(function)
        if selector in owners:
            raise DuplicateSelector(
                f'selector {selector} of "{convention.signature(function)}" is already used '
                f'by "{convention.signature(owners[selector])}"',
                function=function.name,
            )
        owners[selector] = function
        selectors[function] = selector
    return selectors
