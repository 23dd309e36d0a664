"""Turn a styled tree into a "before layout" box tree.

This includes creating anonymous boxes as necessary.

"""

from ..css import node_type
from . import boxes

# Maps values of the ``display`` CSS property to box types.
BOX_TYPE_FROM_DISPLAY = {
    'block': boxes.BLOCK,
    'inline': boxes.INLINE,
}


def build_formatting_structure(style_node):
    """Build a formatting structure (box tree) from a styled tree.

    The root must generate a box: its ``display`` can't be ``none``.

    """
    box = element_to_box(style_node)
    assert box is not None, 'The root node has display: none'
    return box


def element_to_box(style_node):
    """Convert a styled node and its children into a box with children.

    Return ``None`` for nodes that generate no box: elements with
    ``display: none`` (and their whole subtree), comments and processing
    instructions. Text nodes generate inline boxes.

    """
    if node_type(style_node.node) in ('comment', 'processing-instruction'):
        return None
    display = style_node.display()
    if display == 'none':
        return None

    box = boxes.LayoutBox(BOX_TYPE_FROM_DISPLAY[display], style_node)
    for child in style_node.children:
        child_box = element_to_box(child)
        if child_box is not None:
            box.children.append(child_box)
    return inline_in_block(box)


def inline_in_block(box):
    """Wrap inline children of a block box that also has block children.

    Each maximal run of consecutive inline children is wrapped into an
    anonymous block box, so that the children of a block box are either all
    block-level or all inline. Blocks with only inline children are left
    untouched.

    This is the first case in
    https://www.w3.org/TR/CSS21/visuren.html#anonymous-block-level

    Eg.::

        BlockBox[
            InlineBox['Some '],
            InlineBox[InlineBox['text']],
            BlockBox[],
        ]

    is turned into::

        BlockBox[
            AnonymousBox[
                InlineBox['Some '],
                InlineBox[InlineBox['text']],
            ],
            BlockBox[],
        ]

    """
    if box.box_type != boxes.BLOCK:
        return box

    child_types = {child.box_type for child in box.children}
    if boxes.INLINE not in child_types or child_types == {boxes.INLINE}:
        return box

    children = []
    inlines = []
    for child in box.children:
        if child.box_type == boxes.INLINE:
            inlines.append(child)
            continue
        if inlines:
            children.append(boxes.LayoutBox.anonymous_block(inlines))
            inlines = []
        children.append(child)
    if inlines:
        children.append(boxes.LayoutBox.anonymous_block(inlines))
    box.children = children
    return box
