"""
Base class for extender controls.

An extender control attaches client behavior to an existing element (its
target). Server-side it is nothing more than a property bag: every property
is declared through ``ExtenderBuilder`` and lives in the instance's
PropertyStore.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .errors import ExtenderConfigurationError
from .models import ExtenderMetadata
from .registry import PropertyRegistry, default_registry
from .store import PropertyStore

logger = logging.getLogger(__name__)

_MISSING = object()

# Instance attributes of ExtenderControl; property accessors never take these names
RESERVED_ATTRIBUTES = frozenset({
    'registry', 'control_id', 'target_control_id', 'target_control_type', 'store',
})


class ExtenderProperty:
    """Typed accessor delegating to the owning control's PropertyStore."""

    def __init__(self, name: str):
        self.name = name
        self.attribute: Optional[str] = None

    def __set_name__(self, owner: type, attribute: str) -> None:
        self.attribute = attribute

    def __get__(self, obj: Any, objtype: Optional[type] = None) -> Any:
        if obj is None:
            return self
        return obj.get_property_value(self.name)

    def __set__(self, obj: Any, value: Any) -> None:
        obj.set_property_value(self.name, value)

    def __repr__(self) -> str:
        return f"ExtenderProperty({self.name!r})"


class ExtenderControl:
    """
    Server-side half of an extender.

    Subclasses declare their properties in a ``describe`` classmethod, which
    the registry runs once, on first construction:

        class WatermarkExtender(ExtenderControl):
            @classmethod
            def describe(cls, builder):
                builder.property('WatermarkText', default='', required=True)
    """

    def __init__(
        self,
        control_id: str,
        target_control_id: str = "",
        target_control_type: Optional[str] = None,
        registry: Optional[PropertyRegistry] = None,
    ):
        self.registry = registry if registry is not None else default_registry
        self.registry.ensure_registered(type(self))
        self.control_id = control_id
        self.target_control_id = target_control_id
        self.target_control_type = target_control_type
        self.store = PropertyStore(control_id, type(self), self.registry)
        self._client_state: Optional[str] = None

    @property
    def metadata(self) -> ExtenderMetadata:
        return self.registry.metadata_for(type(self))

    def get_property_value(self, name: str, default: Any = _MISSING) -> Any:
        """
        Get a property value.

        Without ``default`` the registered default is used, so a misspelled
        name raises UnknownPropertyError instead of returning None.
        """
        if default is _MISSING:
            default = self.registry.resolve(type(self), name).default_value
        return self.store.get(name, default)

    def set_property_value(self, name: str, value: Any) -> None:
        self.store.set(name, value)

    def update(self, values: Mapping[str, Any]) -> None:
        """Set several properties, in mapping order."""
        for name, value in values.items():
            self.set_property_value(name, value)

    @property
    def enable_client_state(self) -> bool:
        return self.metadata.client_state

    @property
    def client_state(self) -> Optional[str]:
        return self._client_state

    @client_state.setter
    def client_state(self, value: Optional[str]) -> None:
        if not self.enable_client_state:
            raise ExtenderConfigurationError(
                "Client state is not enabled for this extender", type(self).__name__
            )
        self._client_state = value

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(control_id={self.control_id!r}, "
            f"target_control_id={self.target_control_id!r})"
        )
