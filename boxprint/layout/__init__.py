"""Transform a styled tree into a laid out box tree.

Boxes in the new tree have *used values* in their ``dimensions``: the
position and size of their content rectangle, and the thickness of their
paddings, borders and margins.

See https://www.w3.org/TR/CSS21/cascade.html#used-value

"""

from ..formatting_structure.build import build_formatting_structure
from ..logger import PROGRESS_LOGGER
from .block import LayoutError, layout_box

__all__ = ['LayoutError', 'layout_box', 'layout_tree']


def layout_tree(style_root, containing_block):
    """Lay out the styled tree ``style_root`` and return the root box.

    ``containing_block`` is the :class:`Dimensions` of the viewport. It is
    not modified: the root box is laid out as the first box of a copy whose
    content height is zero.

    """
    PROGRESS_LOGGER.info('Step 4 - Creating layout')
    if style_root.display() == 'none':
        raise LayoutError('The root element has display: none')
    root_box = build_formatting_structure(style_root)

    # The cursor starts at the top of the viewport.
    containing_block = containing_block.copy()
    containing_block.content.height = 0
    layout_box(root_box, containing_block)
    return root_box
