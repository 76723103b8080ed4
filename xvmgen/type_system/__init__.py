"""
Types module for the XVM binding generator.

This module provides the direction-agnostic type descriptors and the
per-direction type mappers.
"""

from .descriptors import TypeKind, TypeDescriptor
from .mappings import (
    CodeFragment,
    TypeMapper,
    InkTypeMapper,
    SolidityTypeMapper,
)

__all__ = [
    'TypeKind',
    'TypeDescriptor',
    'CodeFragment',
    'TypeMapper',
    'InkTypeMapper',
    'SolidityTypeMapper',
]
