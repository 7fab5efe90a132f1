"""
ExtenderKit - Server-side extender controls and their client descriptors.

An extender attaches client-side behavior to an existing UI element. On the
server it is a declarative property bag; this package keeps those properties
consistent from declaration to the payload read by the client runtime.

Components:
    1. PropertyRegistry - Per-type property descriptors and client wiring
    2. PropertyStore - Explicitly set values of one control instance
    3. ClientDescriptorEmitter - Projection into the client descriptor
    4. ScriptBlockRenderer - The $create statement for a control instance
    5. DefinitionLoader - Extender types declared in YAML

Quick Start:
    >>> from extenderkit import ClientDescriptorEmitter
    >>> from extenderkit.controls import ColorPickerExtender
    >>> picker = ColorPickerExtender("picker1", target_control_id="ColorBox")
    >>> picker.popup_button_id = "btn1"
    >>> ClientDescriptorEmitter().emit(picker).entries["button"]
    'btn1'
"""

__version__ = "0.3.0"
__author__ = "ExtenderKit"

from .models import (
    PropertyKind,
    PropertyDescriptor,
    ScriptReference,
    ExtenderMetadata,
    ClientDescriptor,
    PositioningMode,
)
from .errors import (
    ExtenderError,
    RegistrationError,
    DuplicatePropertyError,
    DuplicateExtenderError,
    UnknownPropertyError,
    EmissionError,
    MissingRequiredPropertyError,
    InvalidHandlerNameError,
    InvalidElementIdError,
    InvalidTargetControlError,
    DuplicateControlIdError,
    ExtenderConfigurationError,
    DefinitionError,
)
from .registry import PropertyRegistry, default_registry
from .store import PropertyStore
from .builder import ExtenderBuilder
from .control import ExtenderControl, ExtenderProperty
from .config import EmitterConfig, load_config
from .emitter import ClientDescriptorEmitter, emit_client_descriptor
from .scripts import ScriptBlockRenderer, collect_script_references, collect_css_resources
from .loader import DefinitionLoader, load_definitions

__all__ = [
    # Models
    'PropertyKind',
    'PropertyDescriptor',
    'ScriptReference',
    'ExtenderMetadata',
    'ClientDescriptor',
    'PositioningMode',
    # Errors
    'ExtenderError',
    'RegistrationError',
    'DuplicatePropertyError',
    'DuplicateExtenderError',
    'UnknownPropertyError',
    'EmissionError',
    'MissingRequiredPropertyError',
    'InvalidHandlerNameError',
    'InvalidElementIdError',
    'InvalidTargetControlError',
    'DuplicateControlIdError',
    'ExtenderConfigurationError',
    'DefinitionError',
    # Core
    'PropertyRegistry',
    'default_registry',
    'PropertyStore',
    'ExtenderBuilder',
    'ExtenderControl',
    'ExtenderProperty',
    'EmitterConfig',
    'load_config',
    'ClientDescriptorEmitter',
    'emit_client_descriptor',
    # Scripts
    'ScriptBlockRenderer',
    'collect_script_references',
    'collect_css_resources',
    # Definitions
    'DefinitionLoader',
    'load_definitions',
]
