"""
TextBoxWatermark extender.

Shows a watermark text (and optional CSS class) in an empty TextBox.
"""

import logging
from typing import Optional

from ..control import ExtenderControl

logger = logging.getLogger(__name__)

FOCUSED_STATE = "Focused"


class TextBoxWatermarkExtender(ExtenderControl):
    """Watermark for an empty TextBox"""

    @classmethod
    def describe(cls, builder):
        (builder
            .behavior('Sys.Extended.UI.TextBoxWatermarkBehavior', script='TextBoxWatermark')
            .requires('Common')
            .target('TextBox')
            .client_state()
            .property('WatermarkText', default='', required=True)
            .property('WatermarkCssClass', default=''))

    def on_load(self, default_focus: Optional[str]) -> None:
        """Tell the client behavior whether its TextBox has the page's default focus."""
        focused = bool(default_focus) and default_focus.casefold() == self.target_control_id.casefold()
        self.client_state = FOCUSED_STATE if focused else None
        if focused:
            logger.debug(f"{self.control_id}: target '{self.target_control_id}' has default focus")
