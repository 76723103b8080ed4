"""
Loading of raw metadata documents.
"""

import json
from typing import Any, Union

from ..errors import MalformedDocument


def load_document(document: Union[str, bytes, dict, list]) -> Any:
    """
    Decode a metadata document.

    Args:
        document: JSON text (str or bytes) or an already decoded object

    Returns:
        The decoded JSON value (dict or list)

    Raises:
        MalformedDocument: If the text is not valid JSON or the value is
            neither an object nor an array
    """
    if isinstance(document, (bytes, bytearray)):
        try:
            document = document.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedDocument(f'document is not valid UTF-8: {e}') from e

    if isinstance(document, str):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as e:
            raise MalformedDocument(
                f'document is not valid JSON: {e.msg} at line {e.lineno}, column {e.colno}'
            ) from e

    if not isinstance(document, (dict, list)):
        raise MalformedDocument(
            f'expected a JSON object or array, got {type(document).__name__}'
        )
    return document


def require(mapping: dict, key: str, expected: type, what: str, **context) -> Any:
    """Fetch a required field of a given JSON type or raise MalformedDocument."""
    if not isinstance(mapping, dict):
        raise MalformedDocument(f'{what} is not an object', **context)
    if key not in mapping:
        raise MalformedDocument(f'{what} is missing "{key}"', **context)
    value = mapping[key]
    if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
        raise MalformedDocument(
            f'"{key}" of {what} must be {_json_type_name(expected)}', **context
        )
    return value


def _json_type_name(expected: type) -> str:
    return {
        str: 'a string',
        list: 'an array',
        dict: 'an object',
        bool: 'a boolean',
        int: 'an integer',
    }.get(expected, expected.__name__)
