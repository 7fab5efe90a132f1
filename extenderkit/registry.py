"""
Property Registry for ExtenderKit.

Provides centralized registration and lookup of extender metadata:
- Property descriptors (per control type, in registration order)
- Extender metadata (behavior type, scripts, target control types)
- Once-only lazy registration through a control class's ``describe`` hook

Descriptors registered on a base control type are inherited by its
subclasses. The registry is written during registration and read-only
afterwards; writes are serialized through a re-entrant lock.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Set, Type
import logging
import threading

from .errors import (
    DuplicateExtenderError,
    DuplicatePropertyError,
    RegistrationError,
    UnknownPropertyError,
)
from .models import ExtenderMetadata, PropertyDescriptor

logger = logging.getLogger(__name__)


def _type_name(control_type: type) -> str:
    return getattr(control_type, '__name__', str(control_type))


class PropertyRegistry:
    """
    Central registry for extender property descriptors.

    Provides:
    - Idempotent descriptor registration with conflict detection
    - Name resolution across the control type's base classes
    - Deterministic descriptor ordering for emission
    - Guarded lazy registration of control types
    """

    def __init__(self):
        self._descriptors: Dict[type, Dict[str, PropertyDescriptor]] = {}
        self._metadata: Dict[type, ExtenderMetadata] = {}
        self._described: Set[type] = set()
        self._lock = threading.RLock()

    def _lineage(self, control_type: type) -> List[type]:
        """Base classes first, the control type itself last."""
        return list(reversed(getattr(control_type, '__mro__', (control_type,))))

    def _iter_descriptors(self, control_type: type) -> Iterator[PropertyDescriptor]:
        seen = set()
        for cls in self._lineage(control_type):
            for name, descriptor in self._descriptors.get(cls, {}).items():
                if name not in seen:
                    seen.add(name)
                    yield descriptor

    def _registered_subclasses(self, control_type: type) -> List[type]:
        if not isinstance(control_type, type):
            return []
        return [
            cls for cls in self._descriptors
            if cls is not control_type and isinstance(cls, type) and issubclass(cls, control_type)
        ]

    @staticmethod
    def _check_conflict(existing: PropertyDescriptor, descriptor: PropertyDescriptor, type_name: str) -> bool:
        """Return True if ``existing`` is the same registration, raise on a clash."""
        if existing.name == descriptor.name:
            if existing == descriptor:
                return True
            raise DuplicatePropertyError(descriptor.name, type_name, "metadata differs")
        if existing.client_name == descriptor.client_name:
            raise DuplicatePropertyError(
                descriptor.name, type_name,
                f"client name '{descriptor.client_name}' already used by '{existing.name}'",
            )
        return False

    def register(self, control_type: type, descriptor: PropertyDescriptor) -> None:
        """
        Register a property descriptor for a control type.

        Registering the same descriptor twice is a no-op.

        Args:
            control_type: Control class owning the property
            descriptor: Property metadata

        Raises:
            DuplicatePropertyError: If the name is already registered with
                different metadata, or the client name is taken by another
                property of the same type, its base classes or a registered
                subclass
        """
        type_name = _type_name(control_type)
        with self._lock:
            for existing in self._iter_descriptors(control_type):
                if self._check_conflict(existing, descriptor, type_name):
                    return
            for subclass in self._registered_subclasses(control_type):
                for existing in self._descriptors[subclass].values():
                    self._check_conflict(existing, descriptor, _type_name(subclass))

            self._descriptors.setdefault(control_type, {})[descriptor.name] = descriptor
            logger.debug(
                f"Registered property {type_name}.{descriptor.name} "
                f"as '{descriptor.client_name}' ({descriptor.kind.value})"
            )

    def resolve(self, control_type: type, name: str) -> PropertyDescriptor:
        """
        Get the descriptor for a property name.

        Raises:
            UnknownPropertyError: If no descriptor is registered under that name
        """
        for cls in getattr(control_type, '__mro__', (control_type,)):
            descriptor = self._descriptors.get(cls, {}).get(name)
            if descriptor is not None:
                return descriptor
        raise UnknownPropertyError(name, _type_name(control_type))

    def all_for(self, control_type: type) -> List[PropertyDescriptor]:
        """Get all descriptors for a control type, inherited ones first."""
        return list(self._iter_descriptors(control_type))

    def register_metadata(self, control_type: type, metadata: ExtenderMetadata) -> None:
        """
        Register client wiring for a control type.

        Raises:
            DuplicateExtenderError: If different metadata is already registered
        """
        type_name = _type_name(control_type)
        with self._lock:
            existing = self._metadata.get(control_type)
            if existing is not None:
                if existing == metadata:
                    return
                raise DuplicateExtenderError(
                    "Conflicting extender metadata registration", type_name
                )
            self._metadata[control_type] = metadata
            logger.debug(f"Registered extender {type_name} -> {metadata.behavior_type}")

    def register_all(
        self,
        control_type: type,
        descriptors: Iterable[PropertyDescriptor],
        metadata: Optional[ExtenderMetadata] = None,
    ) -> None:
        """
        Register metadata and descriptors of one control type together.

        Either everything is registered or, on a conflict, nothing is.

        Raises:
            RegistrationError: On the first conflicting registration
        """
        with self._lock:
            saved_descriptors = self._descriptors.get(control_type)
            saved_descriptors = dict(saved_descriptors) if saved_descriptors is not None else None
            had_metadata = control_type in self._metadata
            try:
                if metadata is not None:
                    self.register_metadata(control_type, metadata)
                for descriptor in descriptors:
                    self.register(control_type, descriptor)
            except RegistrationError:
                if saved_descriptors is None:
                    self._descriptors.pop(control_type, None)
                else:
                    self._descriptors[control_type] = saved_descriptors
                if not had_metadata:
                    self._metadata.pop(control_type, None)
                logger.debug(f"Rolled back registration of {_type_name(control_type)}")
                raise

    def metadata_for(self, control_type: type) -> ExtenderMetadata:
        """
        Get client wiring merged along the class hierarchy.

        The nearest class that sets a behavior type, script resource or
        target list wins. Required scripts and stylesheets accumulate, base
        classes first. Client state is on if any class enables it.
        """
        merged = ExtenderMetadata()
        for metadata in self.lineage_metadata(control_type):
            merged = ExtenderMetadata(
                behavior_type=metadata.behavior_type or merged.behavior_type,
                script_resource=metadata.script_resource or merged.script_resource,
                required_scripts=merged.required_scripts + metadata.required_scripts,
                css_resources=merged.css_resources + metadata.css_resources,
                target_control_types=metadata.target_control_types or merged.target_control_types,
                client_state=merged.client_state or metadata.client_state,
            )
        return merged

    def lineage_metadata(self, control_type: type) -> List[ExtenderMetadata]:
        """Get metadata registered along the class hierarchy, base classes first."""
        return [self._metadata[cls] for cls in self._lineage(control_type) if cls in self._metadata]

    def ensure_registered(self, control_type: Type) -> None:
        """
        Run the ``describe`` hook of each class in the hierarchy exactly once.

        Usage:
            class MyExtender(ExtenderControl):
                @classmethod
                def describe(cls, builder):
                    builder.property('Text', default='', client_name='text')

        Safe to call from several threads; later calls return immediately.
        """
        if control_type in self._described:
            return

        from .builder import ExtenderBuilder

        with self._lock:
            for cls in self._lineage(control_type):
                if cls in self._described:
                    continue
                if 'describe' in vars(cls):
                    builder = ExtenderBuilder(cls, registry=self)
                    cls.describe(builder)
                    builder.build()
                self._described.add(cls)

    def is_registered(self, control_type: type) -> bool:
        """Check if any descriptor or metadata is registered for the type."""
        return any(
            cls in self._descriptors or cls in self._metadata
            for cls in getattr(control_type, '__mro__', (control_type,))
        )

    def registered_types(self) -> List[type]:
        """Get control types with own registrations, in registration order."""
        types = list(self._metadata.keys())
        for control_type in self._descriptors:
            if control_type not in types:
                types.append(control_type)
        return types

    def find_type(self, name: str) -> Optional[type]:
        """Look up a registered control type by class name."""
        for control_type in self.registered_types():
            if _type_name(control_type) == name:
                return control_type
        return None

    def clear_registry(self) -> None:
        """Clear all registrations (useful for testing)."""
        with self._lock:
            self._descriptors.clear()
            self._metadata.clear()
            self._described.clear()

    def stats(self) -> Dict[str, int]:
        """Get registration statistics."""
        return {
            'control_types': len(self.registered_types()),
            'properties': sum(len(d) for d in self._descriptors.values()),
            'extenders_with_metadata': len(self._metadata),
        }


# Process-wide registry used unless another one is passed explicitly
default_registry = PropertyRegistry()
