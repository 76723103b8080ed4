"""
Translation mode dispatch.

A TranslationMode fixes, for a whole run, which parser reads the input,
which type mapper and template set produce the output, and which selector
convention applies. Each mode carries its ModeProfile; nothing downstream
branches on the mode itself.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Type

from ..diagnostics import GeneratorDiagnostics
from ..errors import UnmappedType
from ..parser.abi_parser import EvmAbiParser
from ..parser.ink_parser import InkMetadataParser
from ..parser.spec_nodes import ContractSpec
from ..type_system.mappings import InkTypeMapper, SolidityTypeMapper, TypeMapper
from .selector import Blake2Selector, KeccakSelector, SelectorConvention
from .templates import InkModuleTemplate, ModuleTemplate, SolidityModuleTemplate


# Virtual machine ids understood by the XVM bridge
EVM_VM_ID = 0x0F
WASM_VM_ID = 0x1F


class TranslationMode(Enum):
    """Direction of one generation run."""
    EVM_TO_INK = 'evm2ink'  # Solidity ABI in, ink! module out
    INK_TO_EVM = 'ink2evm'  # ink! metadata in, Solidity contract out

    @classmethod
    def parse(cls, text: str) -> 'TranslationMode':
        """
        Look up a mode by name or alias (case insensitive).

        Raises:
            ValueError: If the name is unknown
        """
        key = text.strip().lower()
        if key in MODE_ALIASES:
            return MODE_ALIASES[key]
        raise ValueError(f'unknown translation mode "{text}" (expected one of: {", ".join(MODE_ALIASES)})')

    def __str__(self) -> str:
        return self.value


MODE_ALIASES: Dict[str, TranslationMode] = {
    'evm2ink': TranslationMode.EVM_TO_INK,
    'sol2ink': TranslationMode.EVM_TO_INK,
    'atob': TranslationMode.EVM_TO_INK,
    'ink2evm': TranslationMode.INK_TO_EVM,
    'ink2sol': TranslationMode.INK_TO_EVM,
    'btoa': TranslationMode.INK_TO_EVM,
}


@dataclass(frozen=True)
class ModeProfile:
    """Everything that differs between the two translation modes."""
    parser: Type
    mapper: Type[TypeMapper]
    template: Type[ModuleTemplate]
    convention: Type[SelectorConvention]
    default_vm_id: int  # VM id of the callee side
    output_suffix: str


PROFILES: Dict[TranslationMode, ModeProfile] = {
    TranslationMode.EVM_TO_INK: ModeProfile(
        parser=EvmAbiParser,
        mapper=InkTypeMapper,
        template=InkModuleTemplate,
        convention=KeccakSelector,
        default_vm_id=EVM_VM_ID,
        output_suffix='.rs',
    ),
    TranslationMode.INK_TO_EVM: ModeProfile(
        parser=InkMetadataParser,
        mapper=SolidityTypeMapper,
        template=SolidityModuleTemplate,
        convention=Blake2Selector,
        default_vm_id=WASM_VM_ID,
        output_suffix='.sol',
    ),
}


def profile(mode: TranslationMode) -> ModeProfile:
    return PROFILES[mode]


def create_parser(mode: TranslationMode, diagnostics: Optional[GeneratorDiagnostics] = None):
    """Create the metadata parser reading the input of a mode."""
    return PROFILES[mode].parser(diagnostics)


@dataclass(frozen=True)
class Dispatch:
    """The collaborators selected for one run."""
    mode: TranslationMode
    mapper: TypeMapper
    template: ModuleTemplate
    convention: SelectorConvention


def dispatch(mode: TranslationMode, spec: ContractSpec) -> Dispatch:
    """
    Select the mapper, template set and selector convention for a mode.

    Every argument type of the contract is mapped up front, so an unmapped type
    aborts the run before any text is rendered.

    Args:
        mode: The translation mode of the run
        spec: The parsed contract

    Returns:
        The Dispatch for the run

    Raises:
        UnmappedType: If an argument type has no mapping in this mode
    """
    selected = PROFILES[mode]
    mapper = selected.mapper()

    for function in spec.functions:
        for position, arg in enumerate(function.arguments):
            try:
                mapper.check(arg.type)
            except UnmappedType as e:
                raise UnmappedType(
                    e.message,
                    function=function.name,
                    argument=arg.name or None,
                    position=position,
                    raw_type=arg.raw_type or str(arg.type),
                ) from e

    return Dispatch(
        mode=mode,
        mapper=mapper,
        template=selected.template(),
        convention=selected.convention(),
    )
