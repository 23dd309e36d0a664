"""Layout for block-level boxes in normal flow.

Widths are resolved top-down, from the containing block, before children are
laid out. Heights are resolved bottom-up, after children are laid out.

See https://www.w3.org/TR/CSS21/visudet.html#blockwidth

"""

from ..css.units import to_pixels
from ..formatting_structure import boxes


class LayoutError(ValueError):
    """The geometry of a box can't be resolved."""


def length(box, name, negative=True):
    """Return the used value in pixels of the ``name`` length of ``box``.

    ``auto`` counts as zero.

    """
    value = to_pixels(box.style[name], name)
    if not negative and value < 0:
        raise LayoutError(
            f'Negative value {value} for {name!r} on {box.element_tag}')
    return value


def layout_box(box, containing_block):
    """Call the layout function corresponding to the ``box`` type.

    ``containing_block`` is the :class:`Dimensions` of the parent box. Its
    content height is the height of the siblings already laid out.

    """
    if box.box_type == boxes.BLOCK:
        block_layout(box, containing_block)
    elif box.box_type in (boxes.INLINE, boxes.ANONYMOUS):
        from .inline import inline_layout
        inline_layout(box, containing_block)
    else:  # pragma: no cover
        raise TypeError(f'Layout for {box.box_type} not handled yet')


def block_layout(box, containing_block):
    """Lay out the block ``box`` and its descendants."""
    # Child width can depend on parent width, so this box's width has to be
    # calculated before laying out its children.
    block_level_width(box, containing_block)
    block_level_position(box, containing_block)
    layout_children(box)
    # Parent height can depend on child height, it has to be calculated after
    # the children are laid out.
    block_level_height(box)


def block_level_width(box, containing_block):
    """Set the horizontal margins, borders, paddings and width of ``box``.

    Only margin-left, margin-right and width can be ``auto``. We want::

        width of containing block ==
            margin-left + border-left-width + padding-left + width
            + padding-right + border-right-width + margin-right

    """
    style = box.style
    cb_width = containing_block.content.width

    width = style['width']
    margin_l = style['margin_left']
    margin_r = style['margin_right']

    padding_l = length(box, 'padding_left', negative=False)
    padding_r = length(box, 'padding_right', negative=False)
    border_l = length(box, 'border_left_width', negative=False)
    border_r = length(box, 'border_right_width', negative=False)

    if width != 'auto' and to_pixels(width, 'width') < 0:
        raise LayoutError(
            f'Negative value {to_pixels(width)} for width on '
            f'{box.element_tag}')

    total = sum(
        to_pixels(value) for value in (
            margin_l, margin_r, border_l, border_r, padding_l, padding_r,
            width))

    # If width is not auto and the total is wider than the container, treat
    # auto margins as 0.
    if width != 'auto' and total > cb_width:
        if margin_l == 'auto':
            margin_l = 0
        if margin_r == 'auto':
            margin_r = 0

    # Adjust used values so that the above sum equals the containing block
    # width. Each arm of the conditional sets the used values that were auto,
    # or the right margin when none was.
    underflow = cb_width - total

    if width != 'auto':
        width = to_pixels(width)
        if margin_l != 'auto' and margin_r != 'auto':
            # The values are over-constrained, calculate margin_right.
            margin_r = to_pixels(margin_r) + underflow
        elif margin_l != 'auto':
            margin_r = underflow
        elif margin_r != 'auto':
            margin_l = underflow
        else:
            margin_l = margin_r = underflow / 2
    else:
        if margin_l == 'auto':
            margin_l = 0
        if margin_r == 'auto':
            margin_r = 0
        if underflow >= 0:
            # Expand width to fill the underflow.
            width = underflow
        else:
            # Width can't be negative, adjust the right margin instead.
            width = 0
            margin_r = to_pixels(margin_r) + underflow

    dimensions = box.dimensions
    dimensions.content.width = width
    dimensions.padding.left = padding_l
    dimensions.padding.right = padding_r
    dimensions.border.left = border_l
    dimensions.border.right = border_r
    dimensions.margin.left = to_pixels(margin_l, 'margin_left')
    dimensions.margin.right = to_pixels(margin_r, 'margin_right')


def block_level_position(box, containing_block):
    """Set the vertical edges of ``box`` and the position of its content.

    The box is placed below the previous boxes in the same container.
    Vertical ``auto`` margins are zero.

    """
    dimensions = box.dimensions

    dimensions.margin.top = length(box, 'margin_top')
    dimensions.margin.bottom = length(box, 'margin_bottom')
    dimensions.border.top = length(box, 'border_top_width', negative=False)
    dimensions.border.bottom = length(
        box, 'border_bottom_width', negative=False)
    dimensions.padding.top = length(box, 'padding_top', negative=False)
    dimensions.padding.bottom = length(box, 'padding_bottom', negative=False)

    dimensions.content.x = (
        containing_block.content.x + dimensions.margin.left +
        dimensions.border.left + dimensions.padding.left)

    # The content height of the container is the height of the boxes
    # already laid out in it.
    dimensions.content.y = (
        containing_block.content.y + containing_block.content.height +
        dimensions.margin.top + dimensions.border.top +
        dimensions.padding.top)


def layout_children(box):
    """Lay out the children of ``box``, stacked vertically.

    The content height of ``box`` is the sum of the margin heights of its
    children once they are laid out.

    """
    dimensions = box.dimensions
    dimensions.content.height = 0
    for child in box.children:
        layout_box(child, dimensions)
        dimensions.content.height += child.dimensions.margin_box().height


def block_level_height(box):
    """Set the used height of ``box`` when it's an explicit length.

    Otherwise, keep the height set by :func:`layout_children`.

    """
    height = box.style['height']
    if height != 'auto':
        height = to_pixels(height, 'height')
        if height < 0:
            raise LayoutError(
                f'Negative value {height} for height on {box.element_tag}')
        box.dimensions.content.height = height
