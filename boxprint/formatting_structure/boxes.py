"""Classes for the boxes of the CSS formatting structure / box model.

See https://www.w3.org/TR/CSS21/box.html

A :class:`LayoutBox` has a type tag, one of:

* ``BLOCK``, generated by an element with ``display: block``;
* ``INLINE``, generated by any other displayed element and by text;
* ``ANONYMOUS``, a block box with no style, created to wrap a run of inline
  boxes that are siblings of block boxes.

See https://www.w3.org/TR/CSS21/visuren.html#anonymous-block-level

The set of types is closed: layout and drawing test the tag explicitly.

"""

BLOCK = 'block'
INLINE = 'inline'
ANONYMOUS = 'anonymous'
BOX_TYPES = (BLOCK, INLINE, ANONYMOUS)


class Rect:
    """A rectangle, with its top-left corner and its size in CSS pixels."""
    def __init__(self, x=0, y=0, width=0, height=0):
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    def __repr__(self):
        return (
            f'{type(self).__name__}('
            f'{self.x}, {self.y}, {self.width}, {self.height})')

    def __eq__(self, other):
        if not isinstance(other, Rect):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def as_tuple(self):
        return (self.x, self.y, self.width, self.height)

    def copy(self):
        return Rect(*self.as_tuple())

    def expanded_by(self, edge):
        """Return a new rectangle expanded by ``edge`` on all four sides."""
        return Rect(
            self.x - edge.left,
            self.y - edge.top,
            self.width + edge.left + edge.right,
            self.height + edge.top + edge.bottom)


class EdgeSizes:
    """Thickness of the four sides of a padding, border or margin."""
    def __init__(self, top=0, right=0, bottom=0, left=0):
        self.top = top
        self.right = right
        self.bottom = bottom
        self.left = left

    def __repr__(self):
        return (
            f'{type(self).__name__}('
            f'{self.top}, {self.right}, {self.bottom}, {self.left})')

    def __eq__(self, other):
        if not isinstance(other, EdgeSizes):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def as_tuple(self):
        return (self.top, self.right, self.bottom, self.left)

    def copy(self):
        return EdgeSizes(*self.as_tuple())


class Dimensions:
    """Geometry of a box: content rectangle, padding, border and margin.

    Each box level is the previous one expanded by its edges: content, then
    padding, then border, then margin.

    """
    def __init__(self, content=None, padding=None, border=None, margin=None):
        self.content = Rect() if content is None else content
        self.padding = EdgeSizes() if padding is None else padding
        self.border = EdgeSizes() if border is None else border
        self.margin = EdgeSizes() if margin is None else margin

    def __repr__(self):
        return (
            f'<{type(self).__name__} content={self.content!r} '
            f'padding={self.padding!r} border={self.border!r} '
            f'margin={self.margin!r}>')

    def copy(self):
        return Dimensions(
            self.content.copy(), self.padding.copy(), self.border.copy(),
            self.margin.copy())

    def padding_box(self):
        """The area covered by the content area plus its padding."""
        return self.content.expanded_by(self.padding)

    def border_box(self):
        """The area covered by the content area plus padding and borders."""
        return self.padding_box().expanded_by(self.border)

    def margin_box(self):
        """The area covered by the content area plus padding, borders and margin."""
        return self.border_box().expanded_by(self.margin)


class LayoutBox:
    """A box of the layout tree.

    ``style`` is the :class:`StyledNode` the box was generated for, ``None``
    for anonymous boxes. Children are owned by their parent, in order.

    """
    def __init__(self, box_type, style=None, children=None):
        assert box_type in BOX_TYPES, box_type
        assert (style is None) == (box_type == ANONYMOUS)
        self.box_type = box_type
        self.style = style
        self.dimensions = Dimensions()
        self.children = [] if children is None else children

    def __repr__(self):
        if self.style is None:
            return f'<{type(self).__name__} {self.box_type}>'
        return f'<{type(self).__name__} {self.box_type} {self.style.tag}>'

    @classmethod
    def anonymous_block(cls, children=None):
        """Return an anonymous block box wrapping ``children``."""
        return cls(ANONYMOUS, children=children)

    @property
    def element_tag(self):
        return None if self.style is None else self.style.tag

    def descendants(self):
        """A flat generator for a box, its children and descendants."""
        yield self
        for child in self.children:
            yield from child.descendants()

    def dump(self):
        """Return an indented text representation of the box tree."""
        return '\n'.join(_dump_lines(self, 0))


def _dump_lines(box, level):
    content = box.dimensions.content
    name = box.box_type if box.style is None else (
        f'{box.box_type} {box.style.tag}')
    yield (
        f'{"  " * level}{name} '
        f'({content.x:g}, {content.y:g}) {content.width:g}×{content.height:g}')
    for child in box.children:
        yield from _dump_lines(child, level + 1)
