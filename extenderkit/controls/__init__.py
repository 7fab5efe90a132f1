"""
Bundled extender controls.

- ColorPickerExtender: popup color picker for a TextBox
- TextBoxWatermarkExtender: watermark text for an empty TextBox
"""

from .color_picker import ColorPickerExtender
from .textbox_watermark import TextBoxWatermarkExtender, FOCUSED_STATE

__all__ = [
    'ColorPickerExtender',
    'TextBoxWatermarkExtender',
    'FOCUSED_STATE',
]
