"""
Template renderer.

Expands a ModuleTemplate against a ContractSpec. Rendering is a pure
function of its inputs: functions come out in document order and encoders
in first-use order of their types, so the same spec always renders to the
same text.
"""

import textwrap
from typing import Dict, List

from ..errors import RenderError
from ..parser.spec_nodes import ContractSpec, FunctionSpec
from ..type_system.descriptors import TypeDescriptor
from ..type_system.mappings import TypeMapper
from .context import FunctionView, RenderContext
from .selector import Selector, SelectorConvention
from .templates import ModuleTemplate


class TemplateRenderer:
    """
    Renders the output module of one translation mode.

    Usage:
        renderer = TemplateRenderer(template, mapper, convention, 'erc20', vm_id=0x0F)
        text = renderer.render(spec, compute_selectors(spec, convention))
    """

    def __init__(
        self,
        template: ModuleTemplate,
        mapper: TypeMapper,
        convention: SelectorConvention,
        module_name: str,
        vm_id: int,
        bridge_address: str = '',
    ):
        self.template = template
        self.mapper = mapper
        self.convention = convention
        self.module_name = module_name
        self.vm_id = vm_id
        self.bridge_address = bridge_address

    def render(self, spec: ContractSpec, selectors: Dict[FunctionSpec, Selector]) -> str:
        """
        Render the module for a contract.

        Args:
            spec: The parsed contract
            selectors: Selector of every function in the contract

        Returns:
            The generated source text

        Raises:
            RenderError: If a substitution point has no value
        """
        context = RenderContext.build(
            spec,
            selectors,
            self.mapper,
            self.template,
            self.convention,
            module_name=self.module_name,
            vm_id=self.vm_id,
            bridge_address=self.bridge_address,
        )
        return self.render_context(context)

    def render_context(self, context: RenderContext) -> str:
        try:
            return self.template.MODULE.format(
                module_name=context.module_name,
                contract_name=context.contract_name,
                source_name=context.source_name,
                vm_id=context.vm_id,
                bridge_address=context.bridge_address,
                selectors=''.join(self._render_selector(f) for f in context.functions),
                functions=''.join(self._render_function(f) for f in context.functions),
                encoders=''.join(self._render_encoders(context.used_types)),
            )
        except (KeyError, IndexError) as e:
            raise RenderError(f'template field {e.args[0]!r} has no value') from e
        except ValueError as e:
            raise RenderError(f'malformed template: {e}') from e

    # =========================================================================
    # BLOCKS
    # =========================================================================

    def _render_selector(self, function: FunctionView) -> str:
        return self.template.SELECTOR.format(
            const=function.selector_const,
            hex=function.selector.hex(),
            signature=function.signature,
        )

    def _render_function(self, function: FunctionView) -> str:
        template = self.template
        return template.FUNCTION.format(
            docs=''.join(template.DOC.format(line=line) for line in function.docs),
            name=function.name,
            attributes=template.PAYABLE if function.source.payable else '',
            parameters=template.parameters([arg.declaration for arg in function.arguments]),
            selector_const=function.selector_const,
            encoder_calls=''.join(
                template.ENCODER_CALL.format(call=arg.encoder_call)
                for arg in function.arguments
            ),
        )

    def _render_encoders(self, used_types: List[TypeDescriptor]) -> List[str]:
        """Encoders of all used types, then the support routines they need."""
        definitions = []
        support: Dict[str, None] = {}
        for descriptor in used_types:
            fragment = self.mapper.fragment(descriptor)
            definitions.append(fragment.definition)
            for name in fragment.support:
                support.setdefault(name, None)
        definitions.extend(self.mapper.support_definitions(support))

        prefix = self.template.indent * self.template.encoder_depth
        return [
            self.template.ENCODER.format(definition=textwrap.indent(definition, prefix))
            for definition in definitions
        ]
