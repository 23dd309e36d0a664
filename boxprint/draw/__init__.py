"""Take a laid out box tree and turn it into a display list.

The display list is a flat sequence of drawing commands, in painting order.
It is shared by the raster and PDF outputs.

"""

import collections

from tinycss2.color3 import parse_color

from ..formatting_structure.boxes import Rect

#: A rectangle filled with an opaque color. ``color`` is a
#: ``tinycss2.color3.RGBA`` tuple, ``rect`` is a :class:`Rect`.
SolidRectangle = collections.namedtuple('SolidRectangle', ['color', 'rect'])


def build_display_list(layout_root):
    """Return the list of drawing commands for ``layout_root``.

    Boxes are visited in document order, a box before its children, so that
    ancestors are painted first.

    """
    display_list = []
    for box in layout_root.descendants():
        draw_box(display_list, box)
    return display_list


def draw_box(display_list, box):
    """Append the commands drawing the background and borders of ``box``."""
    if box.style is None:
        # Anonymous boxes have no background and no border.
        return
    draw_background(display_list, box)
    draw_borders(display_list, box)


def get_color(box, name, fallback_name):
    """Return the color for ``name``, or ``None`` if it is not painted."""
    color = box.style.lookup(name, fallback_name, None)
    if isinstance(color, str):
        color = parse_color(color)
    if color is None or color == 'currentColor' or color.alpha == 0:
        return None
    return color


def draw_background(display_list, box):
    """Fill the padding box of ``box`` with its background color."""
    color = get_color(box, 'background_color', 'background')
    if color is not None:
        display_list.append(
            SolidRectangle(color, box.dimensions.padding_box()))


def draw_borders(display_list, box):
    """Draw the four border edges of ``box``, top first.

    Each edge covers the whole length of the border box, the left and right
    edges are drawn over the corners of the top and bottom ones.

    """
    dimensions = box.dimensions
    border_box = dimensions.border_box()
    widths = dimensions.border
    x, y, width, height = border_box.as_tuple()
    edges = (
        ('top', widths.top, (x, y, width, widths.top)),
        ('right', widths.right, (
            x + width - widths.right, y, widths.right, height)),
        ('bottom', widths.bottom, (
            x, y + height - widths.bottom, width, widths.bottom)),
        ('left', widths.left, (x, y, widths.left, height)),
    )
    for side, edge_width, rect in edges:
        if not edge_width:
            continue
        color = get_color(box, f'border_{side}_color', 'border_color')
        if color is not None:
            display_list.append(SolidRectangle(color, Rect(*rect)))
