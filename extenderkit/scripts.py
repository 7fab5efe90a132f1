"""
Client script wiring for extenders.

Resolves the scripts an extender needs on the page and renders the
statement that instantiates its client behavior:

    Sys.Application.add_init(function() {
        $create(Sys.Extended.UI.ColorPickerBehavior, {"button":$get("btn1"),"id":"cp1"},
                {"shown":onShown}, null, $get("TextBox1"));
    });

Element references become ``$get(...)`` lookups, event handlers are written
as bare function references. Both were validated by the emitter, which is
why they can appear unquoted.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .emitter import ClientDescriptorEmitter
from .errors import ExtenderConfigurationError
from .registry import PropertyRegistry, default_registry
from .transforms import is_valid_handler_name

logger = logging.getLogger(__name__)

CLIENT_STATE_PROPERTY = "ClientState"


def collect_script_references(
    control_type: type,
    registry: Optional[PropertyRegistry] = None,
) -> List[str]:
    """
    Get the scripts to load for an extender type, in load order.

    Required scripts come first (ordered by load order, then declaration,
    base classes before subclasses), followed by the extenders' own script
    resources. Each name appears once.
    """
    registry = registry if registry is not None else default_registry
    registry.ensure_registered(control_type)

    ordered: List[Tuple[int, int, str]] = []
    resources: List[str] = []
    sequence = 0
    for metadata in registry.lineage_metadata(control_type):
        for reference in metadata.required_scripts:
            ordered.append((reference.load_order, sequence, reference.name))
            sequence += 1
        if metadata.script_resource:
            resources.append(metadata.script_resource)

    scripts: List[str] = []
    for _, _, name in sorted(ordered):
        if name not in scripts:
            scripts.append(name)
    for name in resources:
        if name not in scripts:
            scripts.append(name)
    return scripts


def collect_css_resources(
    control_type: type,
    registry: Optional[PropertyRegistry] = None,
) -> List[str]:
    """Get the stylesheets an extender type needs, base classes first."""
    registry = registry if registry is not None else default_registry
    registry.ensure_registered(control_type)

    resources: List[str] = []
    for metadata in registry.lineage_metadata(control_type):
        for name in metadata.css_resources:
            if name not in resources:
                resources.append(name)
    return resources


class ScriptBlockRenderer:
    """Renders the ``$create`` registration for one extender instance"""

    def __init__(self, emitter: Optional[ClientDescriptorEmitter] = None, indent: str = "    "):
        self.emitter = emitter or ClientDescriptorEmitter()
        self.indent = indent

    def _object(self, members: Dict[str, str]) -> str:
        if not members:
            return "null"
        body = ",".join(f"{self.emitter.to_json(key)}:{value}" for key, value in members.items())
        return "{" + body + "}"

    def render_create(self, control) -> str:
        """
        Render the ``$create(...)`` statement for a control.

        Raises:
            ExtenderConfigurationError: No behavior type or no target control id
        """
        control_type = type(control)
        type_name = control_type.__name__
        registry = self.emitter.registry if self.emitter.registry is not None else control.registry
        registry.ensure_registered(control_type)
        metadata = registry.metadata_for(control_type)

        behavior_type = metadata.behavior_type
        if not behavior_type:
            raise ExtenderConfigurationError("No client behavior type registered", type_name)
        if not is_valid_handler_name(behavior_type):
            raise ExtenderConfigurationError(f"Invalid behavior type '{behavior_type}'", type_name)
        if not control.target_control_id:
            raise ExtenderConfigurationError("Target control id is not set", type_name)

        descriptor = self.emitter.emit(control)

        properties: Dict[str, str] = {}
        events: Dict[str, str] = {}
        for prop in registry.all_for(control_type):
            if prop.client_name not in descriptor.entries:
                continue
            value = descriptor.entries[prop.client_name]
            if prop.is_event:
                events[prop.client_name] = value
            elif prop.is_element_reference:
                properties[prop.client_name] = f"$get({self.emitter.to_json(value)})"
            else:
                properties[prop.client_name] = self.emitter.to_json(value)

        if descriptor.client_state is not None:
            properties[CLIENT_STATE_PROPERTY] = self.emitter.to_json(descriptor.client_state)
        properties["id"] = self.emitter.to_json(control.control_id)

        target = f"$get({self.emitter.to_json(control.target_control_id)})"
        return (
            f"$create({behavior_type}, {self._object(properties)}, "
            f"{self._object(events)}, null, {target});"
        )

    def render(self, control) -> str:
        """Render the create statement wrapped in an application init handler."""
        statement = self.render_create(control)
        logger.debug(f"Rendered script block for '{control.control_id}'")
        return f"Sys.Application.add_init(function() {{\n{self.indent}{statement}\n}});"
