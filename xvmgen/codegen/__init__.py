"""
Code generation module for the XVM binding generator.

This module provides selector calculation, translation mode dispatch and
the template renderer producing ink! or Solidity proxy source.
"""

from .naming import (
    NameAllocator,
    to_snake_case,
    to_upper_snake_case,
    to_upper_camel_case,
)
from .selector import (
    Selector,
    SelectorConvention,
    KeccakSelector,
    Blake2Selector,
    canonical_signature,
    compute_selectors,
)
from .templates import ModuleTemplate, InkModuleTemplate, SolidityModuleTemplate
from .context import RenderContext, FunctionView, ArgumentView
from .renderer import TemplateRenderer
from .dispatcher import (
    TranslationMode,
    ModeProfile,
    Dispatch,
    dispatch,
    profile,
    create_parser,
    EVM_VM_ID,
    WASM_VM_ID,
)

__all__ = [
    'NameAllocator',
    'to_snake_case',
    'to_upper_snake_case',
    'to_upper_camel_case',
    'Selector',
    'SelectorConvention',
    'KeccakSelector',
    'Blake2Selector',
    'canonical_signature',
    'compute_selectors',
    'ModuleTemplate',
    'InkModuleTemplate',
    'SolidityModuleTemplate',
    'RenderContext',
    'FunctionView',
    'ArgumentView',
    'TemplateRenderer',
    'TranslationMode',
    'ModeProfile',
    'Dispatch',
    'dispatch',
    'profile',
    'create_parser',
    'EVM_VM_ID',
    'WASM_VM_ID',
]
