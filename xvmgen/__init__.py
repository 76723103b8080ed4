"""
XVM Binding Generator

This package generates proxy contracts that call across the XVM bridge,
from a Solidity ABI to an ink! module or from ink! metadata to a Solidity
contract.

Module Structure:
- type_system/: Type descriptors and per-direction type mappers
- parser/: ABI and ink! metadata parsing (EvmAbiParser, InkMetadataParser)
- codegen/: Selectors, mode dispatch, templates and the renderer
- config.py: Generator configuration
- diagnostics.py: Notices about dropped entries
- errors.py: Error taxonomy
- bindgen.py: Main generator and command line entry point

Usage:
    from xvmgen import GeneratorConfig, XvmBindingGenerator

    generator = XvmBindingGenerator(GeneratorConfig(module_name='erc20'))
    source = generator.generate_file('ERC20.json')
"""

from .bindgen import XvmBindingGenerator, main
from .codegen import TranslationMode
from .config import GeneratorConfig
from .diagnostics import GeneratorDiagnostics
from .errors import (
    XvmGenError,
    MalformedDocument,
    UnsupportedType,
    UnmappedType,
    DuplicateSelector,
    RenderError,
)

__all__ = [
    'XvmBindingGenerator',
    'main',
    'TranslationMode',
    'GeneratorConfig',
    'GeneratorDiagnostics',
    'XvmGenError',
    'MalformedDocument',
    'UnsupportedType',
    'UnmappedType',
    'DuplicateSelector',
    'RenderError',
]
