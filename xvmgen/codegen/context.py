"""
Render context for the template renderer.

The context resolves everything a template substitutes: rendered function
and argument names, selector constants, declarations and encoder calls. It
is built once from a ContractSpec and its selectors, then only read.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..parser.spec_nodes import ContractSpec, FunctionSpec
from ..type_system.descriptors import TypeDescriptor
from ..type_system.mappings import TypeMapper
from .naming import NameAllocator, to_upper_snake_case
from .selector import Selector, SelectorConvention
from .templates import ModuleTemplate


@dataclass
class ArgumentView:
    """A function argument as it appears in the output."""
    name: str
    type: TypeDescriptor
    declaration: str
    encoder_call: str


@dataclass
class FunctionView:
    """A proxied function as it appears in the output."""
    name: str
    source: FunctionSpec
    signature: str
    selector: Selector
    selector_const: str
    arguments: List[ArgumentView] = field(default_factory=list)
    docs: List[str] = field(default_factory=list)


@dataclass
class RenderContext:
    """Everything the renderer substitutes into a template."""

    module_name: str
    contract_name: str
    source_name: str
    vm_id: str
    bridge_address: str
    functions: List[FunctionView] = field(default_factory=list)
    used_types: List[TypeDescriptor] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        spec: ContractSpec,
        selectors: Dict[FunctionSpec, Selector],
        mapper: TypeMapper,
        template: ModuleTemplate,
        convention: SelectorConvention,
        module_name: str,
        vm_id: int,
        bridge_address: str = '',
    ) -> 'RenderContext':
        """
        Build the context of one generation run.

        Args:
            spec: The parsed contract
            selectors: Selector of every function in the contract
            mapper: Type mapper of the active translation mode
            template: Template set of the active translation mode
            convention: Selector convention of the source system
            module_name: Name of the generated module/contract
            vm_id: Virtual machine id passed to the bridge
            bridge_address: Address of the bridge precompile, if the target calls one
        """
        context = cls(
            module_name=template.module_name(module_name),
            contract_name=template.contract_name(module_name),
            source_name=spec.name or module_name,
            vm_id=template.vm_id_literal(vm_id),
            bridge_address=bridge_address,
            used_types=spec.used_types(),
        )

        helpers = mapper.helper_names(context.used_types)
        function_names = NameAllocator(template.reserved_members + helpers)
        selector_consts = NameAllocator()
        named = []
        for function in spec.functions:
            base = template.function_name(function.name) or 'call'
            if function.is_overloaded:
                base = f'{base}_{function.overload_index}'
            name = function_names.allocate(template.escape(base))
            plain = name[2:] if name.startswith('r#') else name
            const = selector_consts.allocate(f'{to_upper_snake_case(plain)}_SELECTOR')
            named.append((function, name, const))

        # Arguments must not shadow anything a generated body refers to
        members = (
            template.reserved_locals
            + template.reserved_members
            + helpers
            + tuple(const for _, _, const in named)
        )
        for function, name, const in named:
            context.functions.append(FunctionView(
                name=name,
                source=function,
                signature=convention.signature(function),
                selector=selectors[function],
                selector_const=const,
                arguments=cls._argument_views(function, mapper, template, members),
                docs=cls._docs(function, template, convention),
            ))
        return context

    @staticmethod
    def _argument_views(
        function: FunctionSpec,
        mapper: TypeMapper,
        template: ModuleTemplate,
        reserved: Tuple[str, ...] = (),
    ) -> List[ArgumentView]:
        names = NameAllocator(reserved)
        views = []
        for position, arg in enumerate(function.arguments):
            base = template.argument_name(arg.name) or f'arg{position}'
            name = names.allocate(template.escape(base))
            views.append(ArgumentView(
                name=name,
                type=arg.type,
                declaration=mapper.declare(arg.type, name),
                encoder_call=mapper.encoder_call(arg.type, name),
            ))
        return views

    @staticmethod
    def _docs(
        function: FunctionSpec,
        template: ModuleTemplate,
        convention: SelectorConvention,
    ) -> List[str]:
        docs = list(function.docs)
        returns: Optional[TypeDescriptor] = function.returns
        if returns is not None:
            docs.append(template.RETURN_NOTE.format(returns=convention.type_name(returns)))
        if function.payable:
            docs.append(template.PAYABLE_NOTE)
        return docs
