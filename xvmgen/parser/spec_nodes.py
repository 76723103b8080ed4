"""
Contract specification nodes produced by the metadata parsers.

A ContractSpec is built once per generation run and is not modified after
parsing; the renderer only reads it.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from ..type_system.descriptors import TypeDescriptor


@dataclass(frozen=True)
class Argument:
    """A single named, typed function argument."""
    name: str
    type: TypeDescriptor
    raw_type: str = ''  # Type as spelled in the metadata document


@dataclass(frozen=True)
class FunctionSpec:
    """A callable entry accepted from the metadata document."""
    name: str
    arguments: Tuple[Argument, ...] = ()
    returns: Optional[TypeDescriptor] = None  # Parsed but never encoded
    mutates: bool = True
    payable: bool = False
    docs: Tuple[str, ...] = ()
    overload_index: int = 0  # 0 for a unique name, 1..n inside an overload set
    declared_selector: Optional[bytes] = None  # ink! metadata carries its own selectors

    @property
    def is_overloaded(self) -> bool:
        return self.overload_index > 0

    @property
    def argument_types(self) -> Tuple[TypeDescriptor, ...]:
        return tuple(arg.type for arg in self.arguments)


@dataclass(frozen=True)
class ContractSpec:
    """Ordered set of functions, in metadata document order."""
    functions: Tuple[FunctionSpec, ...] = ()
    name: str = ''

    def overload_sets(self) -> Dict[str, List[FunctionSpec]]:
        """Group functions sharing a name, keeping document order."""
        groups: Dict[str, List[FunctionSpec]] = {}
        for function in self.functions:
            groups.setdefault(function.name, []).append(function)
        return groups

    def used_types(self) -> List[TypeDescriptor]:
        """
        Distinct argument types, nested types included, in first-use order.

        Element types come before the arrays that contain them. Return types
        are left out since their encoding is never emitted.
        """
        seen: Dict[TypeDescriptor, None] = {}
        for function in self.functions:
            for arg in function.arguments:
                for descriptor in arg.type.walk():
                    seen.setdefault(descriptor, None)
        return list(seen)


def assign_overload_indices(functions: List[FunctionSpec]) -> Tuple[FunctionSpec, ...]:
    """Number the members of every overload set, starting at 1."""
    counts: Dict[str, int] = {}
    for function in functions:
        counts[function.name] = counts.get(function.name, 0) + 1

    positions: Dict[str, int] = {}
    result = []
    for function in functions:
        if counts[function.name] == 1:
            result.append(replace(function, overload_index=0))
            continue
        positions[function.name] = positions.get(function.name, 0) + 1
        result.append(replace(function, overload_index=positions[function.name]))
    return tuple(result)
