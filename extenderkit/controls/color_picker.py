"""
ColorPicker extender.

Displays a popup color picker when the focus moves to a TextBox. A button
can open the popup instead, and a sample control can preview the color under
the mouse pointer.
"""

from ..control import ExtenderControl
from ..models import PositioningMode


class ColorPickerExtender(ExtenderControl):
    """Popup color picker attached to a TextBox"""

    @classmethod
    def describe(cls, builder):
        (builder
            .behavior('Sys.Extended.UI.ColorPickerBehavior', script='ColorPicker')
            .requires('Common', 'Popup', 'Threading')
            .css('ColorPicker')
            .target('TextBox')
            .property(
                'EnabledOnClient', default=True, client_name='enabled',
                description="Whether the behavior is available for the element",
            )
            .element_reference(
                'PopupButtonID', client_name='button',
                description="Control that opens the popup; the TextBox focus opens it when unset",
            )
            .element_reference(
                'SampleControlID', client_name='sample',
                description="Control whose background previews the color under the pointer",
            )
            .property(
                'PopupPosition', default=PositioningMode.BOTTOM_LEFT, client_name='popupPosition',
                description="Where the popup appears relative to the TextBox",
            )
            .property(
                'SelectedColor', default='', client_name='selectedColor',
                description="Initial color value",
            )
            .event('OnClientShowing', client_name='showing')
            .event('OnClientShown', client_name='shown')
            .event('OnClientHiding', client_name='hiding')
            .event('OnClientHidden', client_name='hidden')
            .event('OnClientColorSelectionChanged', client_name='colorSelectionChanged'))
