"""
Exception types for ExtenderKit.

Every error here signals a mistake by the control author (a typo in a
property name, a conflicting registration, a malformed handler name). None of
them are transient, so callers should surface them rather than retry.
"""

from typing import Optional


class ExtenderError(Exception):
    """Base exception for extender errors."""
    def __init__(self, message: str, control_type: str = ""):
        self.message = message
        self.control_type = control_type
        super().__init__(f"[{control_type}] {message}" if control_type else message)


# ============================================================================
# Registration
# ============================================================================

class RegistrationError(ExtenderError):
    """Error while registering descriptors or extender metadata."""
    pass


class DuplicatePropertyError(RegistrationError):
    """A property name (or client name) was registered twice with different metadata."""
    def __init__(self, property_name: str, control_type: str = "", detail: str = ""):
        self.property_name = property_name
        message = f"Conflicting registration for property '{property_name}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, control_type)


class DuplicateExtenderError(RegistrationError):
    """Extender metadata was registered twice with different values."""
    pass


class UnknownPropertyError(ExtenderError):
    """Property name is not registered for the control type."""
    def __init__(self, property_name: str, control_type: str = ""):
        self.property_name = property_name
        super().__init__(f"Unknown property '{property_name}'", control_type)


# ============================================================================
# Emission
# ============================================================================

class EmissionError(ExtenderError):
    """Error while projecting a control into its client descriptor."""
    pass


class MissingRequiredPropertyError(EmissionError):
    """A required property was never explicitly set."""
    def __init__(self, property_name: str, control_type: str = ""):
        self.property_name = property_name
        super().__init__(f"Required property '{property_name}' was not set", control_type)


class InvalidHandlerNameError(EmissionError):
    """Event handler value is not a valid client identifier path."""
    def __init__(self, property_name: str, value: object, control_type: str = ""):
        self.property_name = property_name
        self.value = value
        super().__init__(
            f"Invalid handler name {value!r} for property '{property_name}'",
            control_type,
        )


class InvalidElementIdError(EmissionError):
    """Element id reference is not a usable element identifier."""
    def __init__(self, property_name: str, value: object, control_type: str = ""):
        self.property_name = property_name
        self.value = value
        super().__init__(
            f"Invalid element id {value!r} for property '{property_name}'",
            control_type,
        )


class InvalidTargetControlError(EmissionError):
    """The extended control is not one of the extender's target types."""
    pass


class DuplicateControlIdError(EmissionError):
    """Two controls in one payload share a control id."""
    def __init__(self, control_id: str, control_type: Optional[str] = None):
        self.control_id = control_id
        super().__init__(f"Duplicate control id '{control_id}' in payload", control_type or "")


# ============================================================================
# Configuration
# ============================================================================

class ExtenderConfigurationError(ExtenderError):
    """Extender is missing metadata it needs (behavior type, target id)."""
    pass


class DefinitionError(ExtenderError):
    """Malformed extender definition file."""
    def __init__(self, message: str, source: str = "", control_type: str = ""):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message, control_type)
