"""PDF stream."""

import pydyf


class Stream(pydyf.Stream):
    """PDF content stream drawing in CSS pixels from the top-left corner.

    PDF coordinates grow from the bottom-left corner of the page, layout
    coordinates from its top-left corner: the y axis is flipped using the
    ``page_height`` of the page, in CSS pixels.

    """
    def __init__(self, page_height, zoom=1, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.page_height = page_height
        self.zoom = zoom
        self._current_color = None

    def set_color(self, color):
        """Set the non-stroking color, if it changed."""
        channels = tuple(color[:3])
        if channels != self._current_color:
            self._current_color = channels
            self.set_color_rgb(*channels)

    def fill_rectangle(self, color, rect):
        """Fill the layout rectangle ``rect`` with ``color``."""
        zoom = self.zoom
        self.set_color(color)
        self.rectangle(
            rect.x * zoom,
            (self.page_height - rect.y - rect.height) * zoom,
            rect.width * zoom,
            rect.height * zoom)
        self.fill()
