"""
Client Descriptor Emitter

Projects a control instance into the descriptor consumed by the client
runtime: every registered property, in registration order, renamed to its
client name and transformed according to its kind. Unset element references
and event handlers are omitted.

Emission reads the store and never writes it, so emitting twice without an
intervening ``set`` produces identical output.
"""

import json
import logging
import math
from typing import Any, Dict, Iterable, Optional

from .config import EmitterConfig
from .errors import (
    DuplicateControlIdError,
    EmissionError,
    InvalidElementIdError,
    InvalidHandlerNameError,
    InvalidTargetControlError,
    MissingRequiredPropertyError,
)
from .models import ClientDescriptor, PropertyDescriptor, PropertyKind
from .registry import PropertyRegistry
from .transforms import DEFAULT_TRANSFORMS, OMIT, is_valid_element_id

logger = logging.getLogger(__name__)


class ClientDescriptorEmitter:
    """Builds and serializes client descriptors"""

    def __init__(
        self,
        registry: Optional[PropertyRegistry] = None,
        config: Optional[EmitterConfig] = None,
    ):
        self.registry = registry
        self.config = config or EmitterConfig()

    def _registry_for(self, control) -> PropertyRegistry:
        if self.registry is not None:
            return self.registry
        return control.registry

    def emit(self, control) -> ClientDescriptor:
        """
        Project a control into its client descriptor.

        Args:
            control: ExtenderControl instance

        Returns:
            ClientDescriptor with entries in registration order

        Raises:
            MissingRequiredPropertyError: Required property never set
            InvalidHandlerNameError: Malformed event handler name
            InvalidElementIdError: Malformed element id reference
            InvalidTargetControlError: Target type not accepted by the extender
            EmissionError: Plain value is a non-finite float
        """
        control_type = type(control)
        type_name = control_type.__name__
        registry = self._registry_for(control)
        registry.ensure_registered(control_type)
        metadata = registry.metadata_for(control_type)

        target_type = getattr(control, 'target_control_type', None)
        if not metadata.accepts_target(target_type):
            raise InvalidTargetControlError(
                f"Cannot extend control of type '{target_type}', "
                f"expected one of: {', '.join(metadata.target_control_types)}",
                type_name,
            )

        store = control.store
        entries: Dict[str, Any] = {}
        for descriptor in registry.all_for(control_type):
            value = store.get(descriptor.name, descriptor.default_value)
            if descriptor.required and not store.has(descriptor.name):
                raise MissingRequiredPropertyError(descriptor.name, type_name)

            serialized = self._transform(descriptor, value, type_name)
            if serialized is OMIT:
                continue
            entries[descriptor.client_name] = serialized

        client_state = control.client_state if metadata.client_state else None
        logger.debug(f"Emitted {type_name} '{control.control_id}' with {len(entries)} entries")
        return ClientDescriptor(control.control_id, entries, client_state)

    def _transform(self, descriptor: PropertyDescriptor, value: Any, type_name: str) -> Any:
        if descriptor.transform is not None:
            value = descriptor.transform(value)
            if value is OMIT:
                return OMIT

        transform = DEFAULT_TRANSFORMS[descriptor.kind]
        if descriptor.kind is PropertyKind.PLAIN_VALUE:
            result = transform(value)
            if isinstance(result, float) and not math.isfinite(result):
                raise EmissionError(f"Property '{descriptor.name}' is not a finite number: {result}", type_name)
            return result

        try:
            result = transform(value)
        except ValueError:
            if descriptor.is_event:
                raise InvalidHandlerNameError(descriptor.name, value, type_name) from None
            raise InvalidElementIdError(descriptor.name, value, type_name) from None

        if descriptor.is_element_reference and result is not OMIT and self.config.id_resolver:
            resolved = self.config.id_resolver(result)
            if not isinstance(resolved, str) or not is_valid_element_id(resolved):
                raise InvalidElementIdError(descriptor.name, resolved, type_name)
            result = resolved
        return result

    def emit_payload(self, controls: Iterable) -> Dict[str, Dict[str, Any]]:
        """
        Emit several controls into one payload keyed by control id.

        Either every control emits or the first error propagates.

        Raises:
            DuplicateControlIdError: Two controls share a control id
        """
        payload: Dict[str, Dict[str, Any]] = {}
        for control in controls:
            if control.control_id in payload:
                raise DuplicateControlIdError(control.control_id, type(control).__name__)
            payload[control.control_id] = self.emit(control).entries
        return payload

    def to_json(self, data: Any) -> str:
        """Serialize deterministically (insertion order, fixed separators)."""
        indent = self.config.json_indent
        try:
            text = json.dumps(
                data,
                indent=indent,
                ensure_ascii=self.config.ensure_ascii,
                separators=(',', ':') if indent is None else (',', ': '),
                allow_nan=False,
            )
        except ValueError as e:
            raise EmissionError(f"Payload is not valid JSON: {e}") from None
        if self.config.escape_script_close:
            text = text.replace('</', '<\\/')
        return text

    def serialize(self, control) -> str:
        """Emit a control and serialize its entries."""
        return self.to_json(self.emit(control).entries)

    def serialize_payload(self, controls: Iterable) -> str:
        return self.to_json(self.emit_payload(controls))


def emit_client_descriptor(control, config: Optional[EmitterConfig] = None) -> ClientDescriptor:
    """Emit a control's client descriptor with its own registry."""
    return ClientDescriptorEmitter(config=config).emit(control)
