"""Reduced layout for inline boxes and anonymous block boxes.

Line breaking and text metrics are not handled: an inline-level box takes
the whole width of its container and the height of its children stacked
vertically.

"""

from .block import layout_box


def inline_layout(box, containing_block):
    """Lay out the inline or anonymous ``box`` and its children.

    Padding, borders and margins of the box are not used, its content
    rectangle is placed at the current cursor of ``containing_block``.

    """
    dimensions = box.dimensions
    dimensions.content.x = containing_block.content.x
    dimensions.content.y = (
        containing_block.content.y + containing_block.content.height)
    dimensions.content.width = containing_block.content.width
    dimensions.content.height = 0
    for child in box.children:
        layout_box(child, dimensions)
        dimensions.content.height += child.dimensions.margin_box().height
