#!/usr/bin/env python3
"""
XVM Binding Generator

Generates a thin proxy contract that forwards calls across the XVM bridge:

- evm2ink: reads a Solidity contract ABI and writes an ink! module whose
  messages call the EVM contract through the XVM chain extension
- ink2evm: reads ink! contract metadata and writes a Solidity contract whose
  functions call the ink! contract through the XVM precompile

Events and read-only functions are not bridged, and return values are not
forwarded: every proxied function returns whether the bridge call succeeded.

Usage:
    python -m xvmgen.bindgen -i ERC20.json -m erc20 > erc20.rs
    python -m xvmgen.bindgen --mode ink2evm -i flipper.json -m flipper -o Flipper.sol
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Union

from .codegen import TemplateRenderer, compute_selectors, create_parser, dispatch
from .config import (
    DEFAULT_BRIDGE_ADDRESS,
    GeneratorConfig,
    parse_bridge_address,
    parse_mode,
    parse_vm_id,
)
from .diagnostics import GeneratorDiagnostics
from .errors import XvmGenError
from .parser.spec_nodes import ContractSpec


class XvmBindingGenerator:
    """Main generator class that orchestrates one generation run."""

    def __init__(self, config: GeneratorConfig, diagnostics: Optional[GeneratorDiagnostics] = None):
        self.config = config
        self.diagnostics = diagnostics or GeneratorDiagnostics(verbose=config.verbose)

    def parse(self, document: Union[str, bytes, dict, list]) -> ContractSpec:
        """Parse a metadata document with the parser of the configured mode."""
        return create_parser(self.config.mode, self.diagnostics).parse(document)

    def generate(self, document: Union[str, bytes, dict, list]) -> str:
        """
        Generate proxy source from a metadata document.

        Args:
            document: The ABI (evm2ink) or ink! metadata (ink2evm)

        Returns:
            The generated source text

        Raises:
            XvmGenError: If any stage fails; nothing is generated in that case
        """
        spec = self.parse(document)
        selected = dispatch(self.config.mode, spec)
        selectors = compute_selectors(spec, selected.convention)
        renderer = TemplateRenderer(
            selected.template,
            selected.mapper,
            selected.convention,
            module_name=self.config.module_name,
            vm_id=self.config.vm_id,
            bridge_address=self.config.bridge_address,
        )
        return renderer.render(spec, selectors)

    def generate_file(self, filepath: Union[str, Path]) -> str:
        """Generate proxy source from a metadata file."""
        with open(filepath, 'rb') as f:
            return self.generate(f.read())

    def write_output(self, text: str, output: Optional[Union[str, Path]] = None) -> Optional[Path]:
        """
        Write generated text to a file, or to stdout if no output is given.

        An existing directory as output receives ``<module_name><suffix>``.

        Returns:
            The path written to, or None for stdout
        """
        if output is None:
            sys.stdout.write(text)
            return None

        output_path = Path(output)
        if output_path.is_dir():
            output_path = output_path / f'{self.config.module_name}{self.config.output_suffix}'
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)
        return output_path


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='xvmgen',
        description='Generate XVM proxy contracts between the EVM and ink!',
    )
    parser.add_argument('-i', '--input', help='Input metadata file (stdin if omitted)')
    parser.add_argument('-o', '--output', help='Output file or directory (stdout if omitted)')
    parser.add_argument('-m', '--module-name', required=True,
                        help='Name of the generated module or contract')
    parser.add_argument('--mode', type=parse_mode, default='evm2ink',
                        help='evm2ink (alias sol2ink) or ink2evm (alias ink2sol)')
    parser.add_argument('--vm-id', '--evm-id', dest='vm_id', type=parse_vm_id, default=None,
                        help='VM id passed to the bridge (default: 0x0F for evm2ink, 0x1F for ink2evm)')
    parser.add_argument('--bridge-address', type=parse_bridge_address, default=DEFAULT_BRIDGE_ADDRESS,
                        help='Address of the XVM precompile called by Solidity proxies')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='List every skipped entry in the summary')
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        config = GeneratorConfig.from_args(args)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1

    generator = XvmBindingGenerator(config)
    try:
        if args.input:
            text = generator.generate_file(args.input)
        else:
            text = generator.generate(sys.stdin.read())
    except OSError as e:
        print(f'Error: cannot read {args.input}: {e.strerror}', file=sys.stderr)
        return 1
    except XvmGenError as e:
        generator.diagnostics.print_summary()
        print(f'Error: {e}', file=sys.stderr)
        return 1

    try:
        written = generator.write_output(text, args.output)
    except OSError as e:
        print(f'Error: cannot write {args.output}: {e.strerror}', file=sys.stderr)
        return 1

    generator.diagnostics.print_summary()
    if written is not None:
        print(f'Written: {written}', file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
