"""Paint a display list onto a pixel buffer, and encode it as PNG."""

import io
from math import floor

from PIL import Image

from . import _write_target
from .draw import build_display_list
from .logger import PROGRESS_LOGGER

WHITE = (255, 255, 255, 255)


def color_to_bytes(color):
    """Convert a ``tinycss2.color3.RGBA`` color to a tuple of 4 bytes."""
    return tuple(round(component * 255) for component in color)


class Canvas:
    """A ``width`` × ``height`` buffer of RGBA pixels, row by row.

    Pixels are white and opaque when the canvas is created.

    """
    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.pixels = [WHITE] * (width * height)

    def __repr__(self):
        return f'<{type(self).__name__} {self.width}×{self.height}>'

    def pixel(self, x, y):
        """Return the RGBA tuple of the pixel at ``(x, y)``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f'Pixel ({x}, {y}) out of {self!r}')
        return self.pixels[y * self.width + x]

    def rows(self):
        """Yield the rows of the canvas, from top to bottom."""
        for y in range(self.height):
            yield self.pixels[y * self.width:(y + 1) * self.width]

    def _clamp(self, value, maximum):
        return min(max(floor(value), 0), maximum)

    def paint_item(self, item):
        """Paint a display list ``item`` onto the canvas.

        The rectangle is clipped to the canvas. Pixels are replaced, colors
        are not blended.

        """
        rect = item.rect
        x0 = self._clamp(rect.x, self.width)
        y0 = self._clamp(rect.y, self.height)
        x1 = self._clamp(rect.x + rect.width, self.width)
        y1 = self._clamp(rect.y + rect.height, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        color = color_to_bytes(item.color)
        row = [color] * (x1 - x0)
        for y in range(y0, y1):
            start = y * self.width
            self.pixels[start + x0:start + x1] = row

    def to_image(self):
        """Return the canvas as a Pillow ``RGBA`` image."""
        image = Image.new('RGBA', (self.width, self.height))
        image.putdata(self.pixels)
        return image

    def write_png(self, target=None):
        """Write PNG bytes to ``target``, or return them if it is ``None``.

        :type target:
            :class:`str`, :class:`pathlib.Path` or :term:`file object`
        :param target:
            A filename, a file object, or :obj:`None`.
        :raises: :class:`boxprint.OutputError` if ``target`` can't be
            written.

        """
        output = io.BytesIO()
        self.to_image().save(output, format='PNG')
        return _write_target(output.getvalue(), target, 'PNG')


def paint(layout_root, bounds):
    """Paint ``layout_root`` onto a new canvas and return the canvas.

    ``bounds`` is a :class:`Rect` whose size, rounded down, is the size of
    the canvas.

    """
    PROGRESS_LOGGER.info('Step 5 - Painting the image')
    canvas = Canvas(floor(bounds.width), floor(bounds.height))
    for item in build_display_list(layout_root):
        canvas.paint_item(item)
    return canvas
