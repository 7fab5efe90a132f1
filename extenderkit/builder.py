"""
Builder for extender registrations.

Collects the property descriptors and client wiring of one control type and
registers them in a single ``build()`` call:

    (ExtenderBuilder(ColorPickerExtender)
        .behavior('Sys.Extended.UI.ColorPickerBehavior', script='ColorPicker')
        .target('TextBox')
        .element_reference('PopupButtonID', client_name='button')
        .event('OnClientShown', client_name='shown')
        .build())

Each property also gets a typed accessor on the control class (see
``ExtenderProperty``) unless the class already defines that attribute.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, List, Optional, Tuple, Union

from .models import ExtenderMetadata, PropertyDescriptor, PropertyKind, ScriptReference
from .registry import PropertyRegistry, default_registry

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')


def attribute_name(property_name: str) -> str:
    """Convert a property name to a Python attribute name (PopupButtonID -> popup_button_id)."""
    return _CAMEL_BOUNDARY.sub('_', property_name).lower()


class ExtenderBuilder:
    """Accumulates registrations for one control type."""

    def __init__(self, control_type: type, registry: Optional[PropertyRegistry] = None):
        self.control_type = control_type
        self.registry = registry if registry is not None else default_registry
        self._properties: List[Tuple[PropertyDescriptor, Optional[str]]] = []
        self._behavior_type: Optional[str] = None
        self._script_resource: Optional[str] = None
        self._required_scripts: List[ScriptReference] = []
        self._css_resources: List[str] = []
        self._targets: List[str] = []
        self._client_state = False
        self._has_metadata = False

    # ..................................................................
    # Properties
    # ..................................................................

    def property(
        self,
        name: str,
        default: Any = None,
        client_name: str = "",
        required: bool = False,
        kind: Union[PropertyKind, str] = PropertyKind.PLAIN_VALUE,
        transform: Optional[Callable[[Any], Any]] = None,
        description: str = "",
        attribute: Optional[str] = None,
    ) -> "ExtenderBuilder":
        descriptor = PropertyDescriptor(
            name=name,
            default_value=default,
            required=required,
            client_name=client_name,
            kind=kind,
            transform=transform,
            description=description,
        )
        self._properties.append((descriptor, attribute))
        return self

    def element_reference(
        self,
        name: str,
        client_name: str = "",
        required: bool = False,
        description: str = "",
        attribute: Optional[str] = None,
    ) -> "ExtenderBuilder":
        """Add a property holding the id of another element ("" means unset)."""
        return self.property(
            name, default="", client_name=client_name, required=required,
            kind=PropertyKind.ELEMENT_ID_REFERENCE, description=description,
            attribute=attribute,
        )

    def event(
        self,
        name: str,
        client_name: str = "",
        description: str = "",
        attribute: Optional[str] = None,
    ) -> "ExtenderBuilder":
        """Add a property naming a client-side event handler ("" means unset)."""
        return self.property(
            name, default="", client_name=client_name,
            kind=PropertyKind.EVENT_HANDLER_NAME, description=description,
            attribute=attribute,
        )

    # ..................................................................
    # Client wiring
    # ..................................................................

    def behavior(self, behavior_type: str, script: Optional[str] = None) -> "ExtenderBuilder":
        self._behavior_type = behavior_type
        self._script_resource = script
        self._has_metadata = True
        return self

    def requires(self, *scripts: Union[str, ScriptReference, Tuple[str, int]]) -> "ExtenderBuilder":
        """Add required scripts; bare names load in the order given."""
        for script in scripts:
            if isinstance(script, ScriptReference):
                reference = script
            elif isinstance(script, tuple):
                reference = ScriptReference(script[0], int(script[1]))
            else:
                reference = ScriptReference(script, len(self._required_scripts))
            self._required_scripts.append(reference)
        self._has_metadata = True
        return self

    def css(self, *resources: str) -> "ExtenderBuilder":
        self._css_resources.extend(resources)
        self._has_metadata = True
        return self

    def target(self, *control_types: str) -> "ExtenderBuilder":
        self._targets.extend(control_types)
        self._has_metadata = True
        return self

    def client_state(self, enabled: bool = True) -> "ExtenderBuilder":
        self._client_state = enabled
        self._has_metadata = True
        return self

    def metadata(self) -> ExtenderMetadata:
        return ExtenderMetadata(
            behavior_type=self._behavior_type,
            script_resource=self._script_resource,
            required_scripts=tuple(self._required_scripts),
            css_resources=tuple(self._css_resources),
            target_control_types=tuple(self._targets),
            client_state=self._client_state,
        )

    def build(self) -> type:
        """
        Register everything collected so far and return the control type.

        Registration is all-or-nothing; accessors are attached only after
        every descriptor has been registered.
        """
        from .control import ExtenderProperty, RESERVED_ATTRIBUTES

        self.registry.register_all(
            self.control_type,
            [descriptor for descriptor, _ in self._properties],
            self.metadata() if self._has_metadata else None,
        )

        for descriptor, attribute in self._properties:
            attr = attribute or attribute_name(descriptor.name)
            if attr in RESERVED_ATTRIBUTES or hasattr(self.control_type, attr):
                logger.debug(f"No accessor for {descriptor.name}: '{attr}' is taken")
            else:
                accessor = ExtenderProperty(descriptor.name)
                setattr(self.control_type, attr, accessor)
                accessor.__set_name__(self.control_type, attr)

        logger.debug(
            f"Built extender {self.control_type.__name__} "
            f"with {len(self._properties)} properties"
        )
        return self.control_type
