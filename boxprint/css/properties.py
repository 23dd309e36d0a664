"""Various data about known CSS properties."""

import collections

from tinycss2.color3 import parse_color

Dimension = collections.namedtuple('Dimension', ['value', 'unit'])

ZERO_PIXELS = Dimension(0, 'px')

# Values used when a property is not set on a styled node. Horizontal margins
# and width start as ``auto`` and are resolved by the block width algorithm,
# vertical margins never take part in auto resolution.
INITIAL_VALUES = {
    'display': 'inline',
    'width': 'auto',
    'height': 'auto',
    'margin_top': ZERO_PIXELS,
    'margin_right': 'auto',
    'margin_bottom': ZERO_PIXELS,
    'margin_left': 'auto',
    'padding_top': ZERO_PIXELS,
    'padding_right': ZERO_PIXELS,
    'padding_bottom': ZERO_PIXELS,
    'padding_left': ZERO_PIXELS,
    'border_top_width': ZERO_PIXELS,
    'border_right_width': ZERO_PIXELS,
    'border_bottom_width': ZERO_PIXELS,
    'border_left_width': ZERO_PIXELS,
    'border_top_style': 'none',
    'border_right_style': 'none',
    'border_bottom_style': 'none',
    'border_left_style': 'none',
    'border_top_color': None,
    'border_right_color': None,
    'border_bottom_color': None,
    'border_left_color': None,
    'background_color': parse_color('transparent'),
}

KNOWN_PROPERTIES = set(name.replace('_', '-') for name in INITIAL_VALUES)

# Shorthand properties whose value applies to each of the four sides. They are
# used as lookup fallbacks when a styled node has not been expanded.
SIDES = ('top', 'right', 'bottom', 'left')
FOUR_SIDES_FALLBACKS = {
    **{f'margin_{side}': 'margin' for side in SIDES},
    **{f'padding_{side}': 'padding' for side in SIDES},
    **{f'border_{side}_width': 'border_width' for side in SIDES},
    **{f'border_{side}_color': 'border_color' for side in SIDES},
}

# https://www.w3.org/TR/CSS21/box.html#border-width-properties
BORDER_WIDTH_KEYWORDS = {
    'thin': 1,
    'medium': 3,
    'thick': 5,
}

BORDER_STYLE_KEYWORDS = {
    'none', 'hidden', 'dotted', 'dashed', 'solid', 'double', 'groove',
    'ridge', 'inset', 'outset'}
