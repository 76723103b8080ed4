"""
Output templates for both translation directions.

Templates are ``str.format`` skeletons. The renderer fills them from a
RenderContext: the module skeleton iterates over the selectors, the
functions and the encoders of the used types; the function skeleton over
documentation lines and arguments. Repeated blocks carry their own leading
blank line so that empty lists collapse cleanly.
"""

from typing import List, Tuple

from .naming import (
    escape_rust,
    escape_solidity,
    identifier,
    to_snake_case,
    to_upper_camel_case,
)


class ModuleTemplate:
    """
    Base template set.

    Skeleton fields:
        MODULE: module_name, contract_name, source_name, vm_id, bridge_address,
            selectors, functions, encoders
        SELECTOR: const, hex, signature
        FUNCTION: docs, name, attributes, parameters, selector_const,
            encoder_calls
        ENCODER: definition
        DOC: line
        ENCODER_CALL: call
    """

    indent = '    '
    encoder_depth = 1
    reserved_locals: Tuple[str, ...] = ()  # Names used inside generated function bodies
    reserved_members: Tuple[str, ...] = ()  # Names used by the generated module itself

    MODULE = ''
    SELECTOR = ''
    FUNCTION = ''
    ENCODER = '\n{definition}\n'
    DOC = ''
    ENCODER_CALL = ''
    PAYABLE = ''
    RETURN_NOTE = ''
    PAYABLE_NOTE = ''

    def module_name(self, name: str) -> str:
        return to_snake_case(name)

    def contract_name(self, name: str) -> str:
        return to_upper_camel_case(name)

    def function_name(self, name: str) -> str:
        raise NotImplementedError

    def argument_name(self, name: str) -> str:
        raise NotImplementedError

    def escape(self, name: str) -> str:
        raise NotImplementedError

    def parameters(self, declarations: List[str]) -> str:
        return ', '.join(declarations)

    def vm_id_literal(self, vm_id: int) -> str:
        return f'0x{vm_id:02X}'


# =============================================================================
# EVM -> INK!
# =============================================================================

class InkModuleTemplate(ModuleTemplate):
    """An ink! contract forwarding its messages to an EVM contract."""

    encoder_depth = 2
    reserved_members = ('new', 'encode_input', 'env')

    MODULE = '''#![cfg_attr(not(feature = "std"), no_std)]

//! XVM proxy for the EVM contract {source_name}.
//! Generated by xvmgen, do not edit.

pub use self::{module_name}::{{{contract_name}, {contract_name}Ref}};

/// Virtual machine id of the EVM in the XVM chain extension.
const EVM_ID: u8 = {vm_id};

#[ink::contract(env = xvm_environment::XvmDefaultEnvironment)]
mod {module_name} {{
    use ethabi::{{
        ethereum_types::{{H160, U256}},
        Token,
    }};
    use hex_literal::hex;
    use ink::prelude::{{string::String, vec, vec::Vec}};
{selectors}
    #[ink(storage)]
    pub struct {contract_name} {{
        evm_address: [u8; 20],
    }}

    impl {contract_name} {{
        /// Create a proxy for the EVM contract at `evm_address`.
        #[ink(constructor)]
        pub fn new(evm_address: [u8; 20]) -> Self {{
            Self {{ evm_address }}
        }}
{functions}
        fn encode_input(selector: [u8; 4], tokens: Vec<Token>) -> Vec<u8> {{
            let mut input = selector.to_vec();
            input.extend(ethabi::encode(&tokens));
            input
        }}
{encoders}    }}
}}
'''

    SELECTOR = '''
    /// {signature}
    const {const}: [u8; 4] = hex!("{hex}");
'''

    FUNCTION = '''
{docs}        #[ink(message{attributes})]
        pub fn {name}(&mut self{parameters}) -> bool {{
            let encoded_input = Self::encode_input({selector_const}, vec![
{encoder_calls}            ]);
            self.env()
                .extension()
                .xvm_call(
                    super::EVM_ID,
                    Vec::from(self.evm_address.as_ref()),
                    encoded_input,
                )
                .is_ok()
        }}
'''

    DOC = '        /// {line}\n'
    ENCODER_CALL = '                {call},\n'
    PAYABLE = ', payable'
    RETURN_NOTE = 'The EVM function returns `{returns}`; the value is not forwarded.'
    PAYABLE_NOTE = 'Payable in the EVM contract; attached value is not forwarded.'

    def function_name(self, name: str) -> str:
        return to_snake_case(name)

    def argument_name(self, name: str) -> str:
        return to_snake_case(name)

    def escape(self, name: str) -> str:
        return escape_rust(name)

    def parameters(self, declarations: List[str]) -> str:
        return ''.join(f', {declaration}' for declaration in declarations)


# =============================================================================
# INK! -> EVM
# =============================================================================

class SolidityModuleTemplate(ModuleTemplate):
    """A Solidity contract forwarding its functions to an ink! contract."""

    reserved_locals = ('input', 'success')
    reserved_members = ('wasm_address', 'XVM_PRECOMPILE', 'WASM_VM_ID')

    MODULE = '''// SPDX-License-Identifier: UNLICENSED
// XVM proxy for the ink! contract {source_name}.
// Generated by xvmgen, do not edit.
pragma solidity ^0.8.0;

interface XVM {{
    function xvm_call(
        uint8 context,
        bytes calldata to,
        bytes calldata input
    ) external returns (bool success, bytes memory data);
}}

contract {contract_name} {{
    XVM constant XVM_PRECOMPILE = XVM({bridge_address});

    // Virtual machine id of Wasm in the XVM precompile
    uint8 constant WASM_VM_ID = {vm_id};
{selectors}
    bytes public wasm_address;

    constructor(bytes memory _wasm_address) {{
        wasm_address = _wasm_address;
    }}
{functions}{encoders}}}
'''

    SELECTOR = '''
    // {signature}
    bytes4 constant {const} = 0x{hex};
'''

    FUNCTION = '''
{docs}    function {name}({parameters}) external{attributes} returns (bool) {{
        bytes memory input = abi.encodePacked(
            {selector_const}{encoder_calls}
        );
        (bool success, ) = XVM_PRECOMPILE.xvm_call(WASM_VM_ID, wasm_address, input);
        return success;
    }}
'''

    DOC = '    /// {line}\n'
    ENCODER_CALL = ',\n            {call}'
    PAYABLE = ' payable'
    RETURN_NOTE = '@dev The ink! message returns `{returns}`; the value is not forwarded.'
    PAYABLE_NOTE = '@dev Payable in the ink! contract; attached value is not forwarded.'

    def function_name(self, name: str) -> str:
        return identifier(name)

    def argument_name(self, name: str) -> str:
        return identifier(name)

    def escape(self, name: str) -> str:
        return escape_solidity(name)
