"""
Data models for ExtenderKit.

This module defines the core data structures shared by the registry, the
store and the emitter:

- PropertyKind: How a property value is serialized for the client
- PropertyDescriptor: Static per-property metadata
- ScriptReference/ExtenderMetadata: Client script wiring of an extender type
- ClientDescriptor: The projection handed to the client runtime
- PositioningMode: Popup placement values understood by the client runtime
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple


class PropertyKind(Enum):
    PLAIN_VALUE = "plain"
    ELEMENT_ID_REFERENCE = "element_id"
    EVENT_HANDLER_NAME = "event"

    @classmethod
    def parse(cls, value: Any) -> "PropertyKind":
        """Accept a PropertyKind, its value or its member name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for kind in cls:
            if text.lower() in (kind.value, kind.name.lower()):
                return kind
        raise ValueError(f"Unknown property kind: {value!r}")


class PositioningMode(Enum):
    """Placement of a popup relative to the extended element."""
    ABSOLUTE = 0
    CENTER = 1
    BOTTOM_LEFT = 2
    BOTTOM_RIGHT = 3
    TOP_LEFT = 4
    TOP_RIGHT = 5
    RIGHT = 6
    LEFT = 7


@dataclass(frozen=True)
class PropertyDescriptor:
    """Metadata for one extender property.

    ``client_name`` falls back to ``name`` when left empty. ``transform``
    runs on the raw value before the kind's own transform, so element id and
    handler name checks still apply to whatever it returns.
    """
    name: str
    default_value: Any = None
    required: bool = False
    client_name: str = ""
    kind: PropertyKind = PropertyKind.PLAIN_VALUE
    transform: Optional[Callable[[Any], Any]] = None
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("Property descriptor requires a name")
        if not self.client_name:
            object.__setattr__(self, 'client_name', self.name)
        object.__setattr__(self, 'kind', PropertyKind.parse(self.kind))

    @property
    def is_event(self) -> bool:
        return self.kind is PropertyKind.EVENT_HANDLER_NAME

    @property
    def is_element_reference(self) -> bool:
        return self.kind is PropertyKind.ELEMENT_ID_REFERENCE


@dataclass(frozen=True)
class ScriptReference:
    """A client script the extender depends on"""
    name: str
    load_order: int = 0


@dataclass(frozen=True)
class ExtenderMetadata:
    """Client-side wiring of an extender type"""
    behavior_type: Optional[str] = None
    script_resource: Optional[str] = None
    required_scripts: Tuple[ScriptReference, ...] = ()
    css_resources: Tuple[str, ...] = ()
    target_control_types: Tuple[str, ...] = ()
    client_state: bool = False

    def accepts_target(self, control_type: Optional[str]) -> bool:
        """Check if a target control type may be extended"""
        if not control_type or not self.target_control_types:
            return True
        return control_type in self.target_control_types


@dataclass
class ClientDescriptor:
    """Serializable projection of one control instance"""
    control_id: str
    entries: Dict[str, Any] = field(default_factory=dict)
    client_state: Optional[str] = None

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, client_name: str) -> bool:
        return client_name in self.entries

    def to_dict(self) -> Dict[str, Any]:
        """Convert descriptor to dictionary"""
        result = {
            'control_id': self.control_id,
            'entries': dict(self.entries),
        }
        if self.client_state is not None:
            result['client_state'] = self.client_state
        return result
