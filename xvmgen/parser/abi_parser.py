"""
Parser for Solidity contract ABI documents.

Accepts either a bare ABI array or a compiler artifact object holding the
ABI under "abi" (Hardhat, Foundry). NatSpec user/dev documentation found in
the artifact is attached to the matching functions.
"""

from typing import List, Optional, Tuple

from ..diagnostics import GeneratorDiagnostics
from ..errors import MalformedDocument, UnsupportedType
from ..type_system.descriptors import TypeDescriptor
from .document import load_document, require
from .filters import FUNCTION, EntryFilter, RawEntry
from .spec_nodes import Argument, ContractSpec, FunctionSpec, assign_overload_indices
from .type_grammar import parse_type


READ_ONLY_MUTABILITY = ('view', 'pure')


class EvmAbiParser:
    """
    Parses a Solidity ABI into a ContractSpec.

    Events and read-only functions are dropped, as are constructor, fallback,
    receive and error entries; each drop is recorded in the diagnostics.
    """

    def __init__(self, diagnostics: Optional[GeneratorDiagnostics] = None):
        self.diagnostics = diagnostics or GeneratorDiagnostics()
        self._filter = EntryFilter(self.diagnostics)

    def parse(self, document) -> ContractSpec:
        """
        Parse an ABI document.

        Args:
            document: JSON text, bytes, or an already decoded ABI list/artifact

        Returns:
            The ContractSpec of all proxied functions, in document order
        """
        data = load_document(document)
        abi, userdoc, devdoc = self._split_artifact(data)

        entries = [self._classify(index, item) for index, item in enumerate(abi)]
        functions = [
            self._parse_function(entry, userdoc, devdoc)
            for entry in self._filter.apply(entries)
        ]

        name = data.get('contractName', '') if isinstance(data, dict) else ''
        return ContractSpec(functions=assign_overload_indices(functions), name=name)

    # =========================================================================
    # DOCUMENT STRUCTURE
    # =========================================================================

    def _split_artifact(self, data) -> Tuple[list, dict, dict]:
        """Return (abi, userdoc, devdoc) from a bare ABI or an artifact."""
        if isinstance(data, list):
            return data, {}, {}

        abi = require(data, 'abi', list, 'artifact')
        userdoc = data.get('userdoc')
        devdoc = data.get('devdoc')

        # Foundry keeps NatSpec in the embedded compiler metadata
        metadata = data.get('metadata')
        if isinstance(metadata, dict) and isinstance(metadata.get('output'), dict):
            userdoc = userdoc or metadata['output'].get('userdoc')
            devdoc = devdoc or metadata['output'].get('devdoc')

        if not isinstance(userdoc, dict):
            userdoc = {}
        if not isinstance(devdoc, dict):
            devdoc = {}
        return abi, userdoc, devdoc

    def _classify(self, index: int, item) -> RawEntry:
        location = f'entry #{index}'
        if not isinstance(item, dict):
            raise MalformedDocument(f'ABI {location} is not an object')

        kind = item.get('type', FUNCTION)
        if not isinstance(kind, str):
            raise MalformedDocument(f'"type" of ABI {location} must be a string')

        name = item.get('name', '')
        if not isinstance(name, str):
            raise MalformedDocument(f'"name" of ABI {location} must be a string')

        mutability = item.get('stateMutability')
        if mutability is not None:
            mutates = mutability not in READ_ONLY_MUTABILITY
        else:
            # Pre-0.4.16 ABIs only carry the "constant" flag
            mutates = not item.get('constant', False)

        return RawEntry(kind=kind, name=name, mutates=mutates, location=location, payload=item)

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    def _parse_function(self, entry: RawEntry, userdoc: dict, devdoc: dict) -> FunctionSpec:
        item = entry.payload
        name = require(item, 'name', str, f'ABI {entry.location}')
        if not name:
            raise MalformedDocument(f'ABI {entry.location} has an empty function name')

        inputs = item.get('inputs', [])
        if not isinstance(inputs, list):
            raise MalformedDocument('"inputs" must be an array', function=name)
        arguments = tuple(
            self._parse_argument(name, position, param)
            for position, param in enumerate(inputs)
        )

        returns = self._parse_returns(name, item.get('outputs', []))

        payable = item.get('stateMutability') == 'payable' or item.get('payable') is True
        if payable:
            self.diagnostics.info_payable_not_forwarded(name, entry.location)

        signature = f'{name}({",".join(arg.type.evm_name() for arg in arguments)})'
        return FunctionSpec(
            name=name,
            arguments=arguments,
            returns=returns,
            mutates=True,
            payable=payable,
            docs=self._collect_docs(signature, userdoc, devdoc),
        )

    def _parse_argument(self, function: str, position: int, param) -> Argument:
        context = {'function': function, 'position': position}
        raw_type = require(param, 'type', str, 'input parameter', **context)
        arg_name = param.get('name') or ''
        if not isinstance(arg_name, str):
            raise MalformedDocument('"name" of input parameter must be a string', **context)

        return Argument(
            name=arg_name,
            type=self._parse_type(raw_type, function=function, argument=arg_name or None, position=position),
            raw_type=raw_type,
        )

    def _parse_returns(self, function: str, outputs) -> Optional[TypeDescriptor]:
        if not isinstance(outputs, list):
            raise MalformedDocument('"outputs" must be an array', function=function)
        if not outputs:
            return None
        if len(outputs) > 1:
            raw = ','.join(str(o.get('type')) if isinstance(o, dict) else '?' for o in outputs)
            raise UnsupportedType(
                'multiple return values are not supported',
                function=function,
                raw_type=f'({raw})',
            )
        # Unlike ink! return types this is not downgraded to a warning, see
        # InkMetadataParser._parse_returns
        raw_type = require(outputs[0], 'type', str, 'output parameter', function=function)
        return self._parse_type(raw_type, function=function, argument='<return>')

    def _parse_type(self, raw_type: str, **context) -> TypeDescriptor:
        try:
            return parse_type(raw_type)
        except UnsupportedType as e:
            raise UnsupportedType(e.message, raw_type=raw_type, **context) from e

    def _collect_docs(self, signature: str, userdoc: dict, devdoc: dict) -> Tuple[str, ...]:
        lines: List[str] = []
        for doc, key in ((userdoc, 'notice'), (devdoc, 'details')):
            methods = doc.get('methods', {})
            method = methods.get(signature) if isinstance(methods, dict) else None
            text = method.get(key) if isinstance(method, dict) else None
            if isinstance(text, str):
                lines.extend(line.strip() for line in text.strip().splitlines())
        return tuple(lines)
