"""
Per-instance property storage.

A PropertyStore belongs to exactly one control instance. It holds only the
values that were explicitly set; defaults live on the descriptors. Stores
are not synchronized; each control instance owns its own.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from .registry import PropertyRegistry, default_registry

logger = logging.getLogger(__name__)


class PropertyStore:
    """Ordered name -> value mapping validated against the registry"""

    def __init__(
        self,
        control_id: str,
        control_type: type,
        registry: Optional[PropertyRegistry] = None,
    ):
        self.control_id = control_id
        self.control_type = control_type
        self.registry = registry if registry is not None else default_registry
        self._values: Dict[str, Any] = {}

    def get(self, name: str, fallback: Any = None) -> Any:
        """Get the stored value, or ``fallback`` if the property was never set."""
        return self._values.get(name, fallback)

    def set(self, name: str, value: Any) -> None:
        """
        Store a value and mark the property explicitly set.

        Raises:
            UnknownPropertyError: If ``name`` is not registered for the control type
        """
        self.registry.resolve(self.control_type, name)
        self._values[name] = value
        logger.debug(f"{self.control_id}: set {name}={value!r}")

    def has(self, name: str) -> bool:
        """Check if the property was explicitly set"""
        return name in self._values

    def names(self) -> List[str]:
        """Explicitly set property names, in the order they were first set"""
        return list(self._values)

    def snapshot(self) -> Dict[str, Any]:
        """Copy of the explicitly set values"""
        return dict(self._values)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PropertyStore({self.control_id!r}, {self.control_type.__name__}, {self._values!r})"
