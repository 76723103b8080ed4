"""
Parser module for the XVM binding generator.

This module turns Solidity ABI documents and ink! metadata into
ContractSpecs, dropping the entries that cannot be bridged.
"""

from .spec_nodes import (
    Argument,
    FunctionSpec,
    ContractSpec,
    assign_overload_indices,
)
from .type_grammar import parse_type
from .filters import (
    RawEntry,
    EntryFilter,
    is_event,
    is_read_only,
    is_proxied,
)
from .document import load_document
from .abi_parser import EvmAbiParser
from .ink_parser import InkMetadataParser, InkTypeRegistry

__all__ = [
    # Nodes
    'Argument',
    'FunctionSpec',
    'ContractSpec',
    'assign_overload_indices',
    # Types
    'parse_type',
    # Filtering
    'RawEntry',
    'EntryFilter',
    'is_event',
    'is_read_only',
    'is_proxied',
    # Parsers
    'load_document',
    'EvmAbiParser',
    'InkMetadataParser',
    'InkTypeRegistry',
]
