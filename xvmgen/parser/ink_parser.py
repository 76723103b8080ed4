"""
Parser for ink! contract metadata.

ink! metadata describes argument types by id into a scale-info type
registry. The registry is resolved recursively into TypeDescriptors:

- primitives map directly (``str`` becomes String, ``char`` is unsupported)
- ``[u8; N]`` with N <= 32 becomes fixed bytes, other arrays fixed arrays
- ``Vec<u8>`` becomes dynamic bytes, other sequences dynamic arrays
- composites named ``H160`` become addresses; other single-field
  composites (``AccountId``, ``Hash``) are unwrapped to their field

Tuples, enums, compact and bit-sequence types are not supported.
"""

from typing import Dict, List, Optional, Set, Tuple

from ..diagnostics import GeneratorDiagnostics
from ..errors import MalformedDocument, UnsupportedType
from ..type_system.descriptors import ADDRESS_BYTES, MAX_FIXED_BYTES, TypeDescriptor
from .document import load_document, require
from .filters import EVENT, FUNCTION, EntryFilter, RawEntry
from .spec_nodes import Argument, ContractSpec, FunctionSpec, assign_overload_indices


LEGACY_ENVELOPES = ('V3', 'V2', 'V1')

UNSIGNED_PRIMITIVES = {f'u{width}': width for width in (8, 16, 32, 64, 128, 256)}
SIGNED_PRIMITIVES = {f'i{width}': width for width in (8, 16, 32, 64, 128, 256)}


# =============================================================================
# TYPE REGISTRY
# =============================================================================

class InkTypeRegistry:
    """Resolves scale-info registry ids to TypeDescriptors."""

    def __init__(self, types: list, first_id: int = 0):
        self._types: Dict[int, dict] = {}
        self._resolved: Dict[int, TypeDescriptor] = {}
        self._resolving: Set[int] = set()

        for position, entry in enumerate(types):
            if not isinstance(entry, dict):
                raise MalformedDocument(f'type registry entry #{position} is not an object')
            type_id = entry.get('id', position + first_id)
            ty = entry.get('type', entry)
            if not isinstance(type_id, int) or not isinstance(ty, dict):
                raise MalformedDocument(f'type registry entry #{position} is malformed')
            self._types[type_id] = ty

    def lookup(self, type_id: int) -> dict:
        if not isinstance(type_id, int) or type_id not in self._types:
            raise MalformedDocument(f'unknown type id {type_id!r}')
        return self._types[type_id]

    def display_name(self, type_id: int) -> str:
        """Human readable name of a registry type, for error messages."""
        ty = self.lookup(type_id)
        path = ty.get('path') or []
        if path:
            return '::'.join(str(segment) for segment in path)
        definition = ty.get('def', {})
        if isinstance(definition, dict) and 'primitive' in definition:
            return str(definition['primitive'])
        return f'type #{type_id}'

    def resolve(self, type_id: int) -> TypeDescriptor:
        """
        Resolve a registry id into a TypeDescriptor.

        Raises:
            UnsupportedType: If the type (or a nested type) has no descriptor
            MalformedDocument: If the registry entry is malformed
        """
        if type_id in self._resolved:
            return self._resolved[type_id]
        if type_id in self._resolving:
            raise UnsupportedType('recursive types are not supported',
                                  raw_type=self.display_name(type_id))

        self._resolving.add(type_id)
        try:
            descriptor = self._convert(type_id, self.lookup(type_id))
        finally:
            self._resolving.discard(type_id)

        self._resolved[type_id] = descriptor
        return descriptor

    def unwrap_lang_error(self, type_id: int) -> int:
        """Strip the ink! 4 ``Result<T, LangError>`` message wrapper."""
        ty = self.lookup(type_id)
        path = ty.get('path') or []
        params = ty.get('params') or []
        if path and path[-1] == 'Result' and isinstance(params, list) and len(params) == 2:
            ok_id, err_id = (
                require(param, 'type', int, f'parameter of type #{type_id}') for param in params
            )
            if self.display_name(err_id).endswith('LangError'):
                return ok_id
        return type_id

    def is_unit(self, type_id: int) -> bool:
        definition = self.lookup(type_id).get('def', {})
        return isinstance(definition, dict) and definition.get('tuple') == []

    def _convert(self, type_id: int, ty: dict) -> TypeDescriptor:
        definition = ty.get('def')
        if not isinstance(definition, dict) or len(definition) != 1:
            raise MalformedDocument(f'type #{type_id} has no single "def" entry')
        (kind, body), = definition.items()
        name = self.display_name(type_id)

        if kind == 'primitive':
            return self._convert_primitive(body, name)

        if kind == 'array':
            element_id = require(body, 'type', int, f'array type #{type_id}')
            length = require(body, 'len', int, f'array type #{type_id}')
            element = self.resolve(element_id)
            if element == TypeDescriptor.unsigned(8) and 1 <= length <= MAX_FIXED_BYTES:
                return TypeDescriptor.fixed_bytes(length)
            return TypeDescriptor.fixed_array(element, length)

        if kind == 'sequence':
            element = self.resolve(require(body, 'type', int, f'sequence type #{type_id}'))
            if element == TypeDescriptor.unsigned(8):
                return TypeDescriptor.dynamic_bytes()
            return TypeDescriptor.dynamic_array(element)

        if kind == 'composite':
            return self._convert_composite(type_id, ty, body, name)

        if kind == 'tuple':
            raise UnsupportedType('tuples are not supported', raw_type=name)
        if kind == 'variant':
            raise UnsupportedType('enums are not supported', raw_type=name)
        raise UnsupportedType(f'"{kind}" types are not supported', raw_type=name)

    def _convert_primitive(self, primitive, name: str) -> TypeDescriptor:
        if primitive == 'bool':
            return TypeDescriptor.boolean()
        if primitive == 'str':
            return TypeDescriptor.string()
        if primitive in UNSIGNED_PRIMITIVES:
            return TypeDescriptor.unsigned(UNSIGNED_PRIMITIVES[primitive])
        if primitive in SIGNED_PRIMITIVES:
            return TypeDescriptor.signed(SIGNED_PRIMITIVES[primitive])
        raise UnsupportedType(f'primitive "{primitive}" is not supported', raw_type=name)

    def _convert_composite(self, type_id: int, ty: dict, body, name: str) -> TypeDescriptor:
        fields = require(body, 'fields', list, f'composite type #{type_id}')
        if len(fields) != 1:
            raise UnsupportedType('structs are not supported', raw_type=name)

        inner = self.resolve(require(fields[0], 'type', int, f'field of type #{type_id}'))
        path = ty.get('path') or []
        if path and path[-1] == 'H160':
            if inner != TypeDescriptor.fixed_bytes(ADDRESS_BYTES):
                raise UnsupportedType('H160 must wrap [u8; 20]', raw_type=name)
            return TypeDescriptor.address()
        return inner


# =============================================================================
# METADATA PARSER
# =============================================================================

class InkMetadataParser:
    """
    Parses ink! metadata (V1-V3 envelopes or the V4+ flat layout) into a
    ContractSpec. Constructors, events and non-mutating messages are dropped.
    """

    def __init__(self, diagnostics: Optional[GeneratorDiagnostics] = None):
        self.diagnostics = diagnostics or GeneratorDiagnostics()
        self._filter = EntryFilter(self.diagnostics)

    def parse(self, document) -> ContractSpec:
        data = load_document(document)
        if not isinstance(data, dict):
            raise MalformedDocument('ink! metadata must be a JSON object')

        version, project = self._unwrap_envelope(data)
        spec = require(project, 'spec', dict, 'ink! metadata')
        # V1 registries carry no ids and number their types from 1
        registry = InkTypeRegistry(
            require(project, 'types', list, 'ink! metadata'),
            first_id=1 if version == 'V1' else 0,
        )

        entries = self._classify(spec)
        functions = [self._parse_message(entry, registry) for entry in self._filter.apply(entries)]

        contract = data.get('contract')
        name = contract.get('name', '') if isinstance(contract, dict) else ''
        return ContractSpec(functions=assign_overload_indices(functions), name=name)

    def _unwrap_envelope(self, data: dict) -> Tuple[str, dict]:
        """Return the envelope key (empty for flat metadata) and the project."""
        for key in LEGACY_ENVELOPES:
            if key in data:
                return key, require(data, key, dict, 'ink! metadata')
        return '', data

    def _classify(self, spec: dict) -> List[RawEntry]:
        entries: List[RawEntry] = []
        sections = (('constructors', 'constructor'), ('messages', FUNCTION), ('events', EVENT))
        for section, kind in sections:
            items = spec.get(section, [])
            if not isinstance(items, list):
                raise MalformedDocument(f'"{section}" of ink! spec must be an array')
            for index, item in enumerate(items):
                location = f'{section}[{index}]'
                if not isinstance(item, dict):
                    raise MalformedDocument(f'{location} is not an object')
                mutates = item.get('mutates', True) if kind == FUNCTION else True
                entries.append(RawEntry(
                    kind=kind,
                    name=self._label(item, location),
                    mutates=bool(mutates),
                    location=location,
                    payload=item,
                ))
        return entries

    def _label(self, item: dict, location: str) -> str:
        label = item.get('label')
        if label is None:
            # V1/V2 metadata spells the label as a path segment list
            label = item.get('name')
            if isinstance(label, list):
                label = '::'.join(str(segment) for segment in label)
        if not isinstance(label, str) or not label:
            raise MalformedDocument(f'{location} is missing "label"')
        return label

    # =========================================================================
    # MESSAGES
    # =========================================================================

    def _parse_message(self, entry: RawEntry, registry: InkTypeRegistry) -> FunctionSpec:
        item = entry.payload
        name = entry.name

        args = item.get('args', [])
        if not isinstance(args, list):
            raise MalformedDocument('"args" must be an array', function=name)
        arguments = tuple(
            self._parse_argument(name, position, arg, registry)
            for position, arg in enumerate(args)
        )

        payable = item.get('payable') is True
        if payable:
            self.diagnostics.info_payable_not_forwarded(name, entry.location)

        docs = item.get('docs', [])
        if not isinstance(docs, list):
            raise MalformedDocument('"docs" must be an array', function=name)

        return FunctionSpec(
            name=name,
            arguments=arguments,
            returns=self._parse_returns(name, item.get('returnType'), registry, entry.location),
            mutates=True,
            payable=payable,
            docs=tuple(str(line).strip() for line in docs if str(line).strip()),
            declared_selector=self._parse_selector(name, item.get('selector')),
        )

    def _parse_argument(self, function: str, position: int, arg, registry: InkTypeRegistry) -> Argument:
        context = {'function': function, 'position': position}
        if not isinstance(arg, dict):
            raise MalformedDocument('message argument is not an object', **context)

        arg_name = self._label_or_empty(arg)
        type_ref = require(arg, 'type', dict, 'message argument', **context)
        type_id = require(type_ref, 'type', int, 'argument type reference', **context)
        raw_type = self._type_display(type_ref, type_id, registry)

        try:
            descriptor = registry.resolve(type_id)
        except UnsupportedType as e:
            raise UnsupportedType(
                e.message, argument=arg_name or None, raw_type=raw_type, **context
            ) from e
        return Argument(name=arg_name, type=descriptor, raw_type=raw_type)

    def _parse_returns(
        self,
        function: str,
        type_ref,
        registry: InkTypeRegistry,
        location: str,
    ) -> Optional[TypeDescriptor]:
        if type_ref is None:
            return None
        type_id = require(type_ref, 'type', int, 'return type reference', function=function)
        type_id = registry.unwrap_lang_error(type_id)
        if registry.is_unit(type_id):
            return None
        # Messages commonly return user enums such as Result<(), Error>, which have
        # no descriptor. Return values never cross the bridge, so such a type is
        # recorded as none with W001. EvmAbiParser rejects an unparseable return
        # instead: a Solidity return is a plain ABI type string, and one outside
        # the grammar means the document is broken.
        try:
            return registry.resolve(type_id)
        except UnsupportedType as e:
            self.diagnostics.warn_return_not_representable(
                function, f'{registry.display_name(type_id)}: {e.message}', location
            )
            return None

    def _parse_selector(self, function: str, selector) -> Optional[bytes]:
        if selector is None:
            return None
        if isinstance(selector, str):
            text = selector[2:] if selector.lower().startswith('0x') else selector
            try:
                value = bytes.fromhex(text)
            except ValueError:
                value = b''
            if len(value) == 4:
                return value
        raise MalformedDocument(f'invalid selector {selector!r}', function=function)

    def _label_or_empty(self, arg: dict) -> str:
        label = arg.get('label', arg.get('name', ''))
        if isinstance(label, list):
            label = '::'.join(str(segment) for segment in label)
        return label if isinstance(label, str) else ''

    def _type_display(self, type_ref: dict, type_id: int, registry: InkTypeRegistry) -> str:
        display = type_ref.get('displayName')
        if isinstance(display, list) and display:
            return '::'.join(str(segment) for segment in display)
        return registry.display_name(type_id)
