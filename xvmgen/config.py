"""
Generator configuration.

The values the pipeline consumes from outside: the name of the generated
module, the translation mode, the VM id passed to the bridge and the address
of the XVM precompile the Solidity proxies call.
"""

import argparse
from dataclasses import dataclass
from typing import Optional

from eth_utils import is_address, to_checksum_address

from .codegen.dispatcher import TranslationMode, profile


# Address of the XVM precompile on Astar networks
DEFAULT_BRIDGE_ADDRESS = '0x0000000000000000000000000000000000005005'

DEFAULT_VM_IDS = {mode: profile(mode).default_vm_id for mode in TranslationMode}


def parse_vm_id(text: str) -> int:
    """
    Parse a VM id given as hex ('0x0F') or decimal ('15').

    Raises:
        argparse.ArgumentTypeError: If the value is not a byte
    """
    try:
        value = int(text, 16) if text.lower().startswith('0x') else int(text, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f'invalid VM id "{text}"')
    if not 0 <= value <= 0xFF:
        raise argparse.ArgumentTypeError(f'VM id must fit in one byte, got {text}')
    return value


def parse_mode(text: str) -> TranslationMode:
    try:
        return TranslationMode.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_bridge_address(text: str) -> str:
    """Validate an address and return it in checksummed form."""
    if not is_address(text):
        raise argparse.ArgumentTypeError(f'invalid bridge address "{text}"')
    return to_checksum_address(text)


@dataclass
class GeneratorConfig:
    """Settings of one generation run."""
    module_name: str
    mode: TranslationMode = TranslationMode.EVM_TO_INK
    vm_id: Optional[int] = None  # None selects the default of the mode
    bridge_address: str = DEFAULT_BRIDGE_ADDRESS
    verbose: bool = False

    def __post_init__(self):
        if not self.module_name or not self.module_name.strip():
            raise ValueError('module name must not be empty')
        if self.vm_id is None:
            self.vm_id = DEFAULT_VM_IDS[self.mode]
        elif not 0 <= self.vm_id <= 0xFF:
            raise ValueError(f'VM id must fit in one byte, got {self.vm_id}')
        self.bridge_address = to_checksum_address(self.bridge_address)

    @property
    def output_suffix(self) -> str:
        return profile(self.mode).output_suffix

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> 'GeneratorConfig':
        return cls(
            module_name=args.module_name,
            mode=args.mode,
            vm_id=args.vm_id,
            bridge_address=args.bridge_address,
            verbose=args.verbose,
        )
