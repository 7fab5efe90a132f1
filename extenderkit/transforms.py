"""
Value transforms applied when a property is emitted.

Each PropertyKind has a default transform. A transform returns the value to
serialize, or ``OMIT`` to leave the entry out of the client descriptor.
Handler names and element ids end up in client-executed script, so their
grammar is deliberately narrow: anything outside it is rejected, never
escaped or passed through.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict

from .models import PropertyKind

# Sentinel for entries left out of the client descriptor
OMIT = object()

# ASCII subset of ECMAScript IdentifierName, dotted for namespaced handlers
_IDENTIFIER = r'[A-Za-z_$][A-Za-z0-9_$]*'
HANDLER_NAME_PATTERN = re.compile(rf'{_IDENTIFIER}(?:\.{_IDENTIFIER})*')

ELEMENT_ID_PATTERN = re.compile(r'[A-Za-z_][A-Za-z0-9_\-:.$]*')

RESERVED_WORDS = frozenset({
    'arguments', 'await', 'break', 'case', 'catch', 'class', 'const',
    'continue', 'debugger', 'default', 'delete', 'do', 'else', 'enum',
    'eval', 'export', 'extends', 'false', 'finally', 'for', 'function',
    'if', 'implements', 'import', 'in', 'instanceof', 'interface', 'let',
    'new', 'null', 'package', 'private', 'protected', 'public', 'return',
    'static', 'super', 'switch', 'this', 'throw', 'true', 'try', 'typeof',
    'var', 'void', 'while', 'with', 'yield',
})


def is_unset(value: Any) -> bool:
    return value is None or value == ""


def to_primitive(value: Any) -> Any:
    """Coerce a value to something the JSON serializer emits as-is."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return to_primitive(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_primitive(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_primitive(v) for v in value]
    return str(value)


def is_valid_handler_name(value: str) -> bool:
    if not HANDLER_NAME_PATTERN.fullmatch(value):
        return False
    return not any(part in RESERVED_WORDS for part in value.split('.'))


def is_valid_element_id(value: str) -> bool:
    return bool(ELEMENT_ID_PATTERN.fullmatch(value))


def plain_value(value: Any) -> Any:
    return to_primitive(value)


def element_id_reference(value: Any) -> Any:
    """Element ids pass through; empty means the reference is unset.

    Raises:
        ValueError: If the value is not a valid element id
    """
    if is_unset(value):
        return OMIT
    if not isinstance(value, str) or not is_valid_element_id(value):
        raise ValueError(value)
    return value


def event_handler_name(value: Any) -> Any:
    """Handler names pass through; empty means no handler.

    Raises:
        ValueError: If the value is not a dotted identifier path
    """
    if is_unset(value):
        return OMIT
    if not isinstance(value, str) or not is_valid_handler_name(value):
        raise ValueError(value)
    return value


DEFAULT_TRANSFORMS: Dict[PropertyKind, Callable[[Any], Any]] = {
    PropertyKind.PLAIN_VALUE: plain_value,
    PropertyKind.ELEMENT_ID_REFERENCE: element_id_reference,
    PropertyKind.EVENT_HANDLER_NAME: event_handler_name,
}
