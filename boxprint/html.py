"""Parse HTML documents and pretty print them.

The user-agent stylesheet applied to every HTML document is defined here.

"""

from importlib.resources import files

import tinyhtml5

from . import CSS, css
from .css import node_type

HTML5_UA = (files(css) / 'html5_ua.css').read_text('utf-8')
HTML5_UA_STYLESHEET = CSS(string=HTML5_UA)


def parse_html(source, **kwargs):
    """Parse ``source`` and return the root ``html`` element.

    ``source`` is a string or a binary file object. Elements are not put in
    the HTML namespace, so that their tag is their local name.

    """
    return tinyhtml5.parse(source, namespace_html_elements=False, **kwargs)


def pretty_print(root, indent='  '):
    """Return an indented text representation of the document ``root``.

    Elements are shown with their attributes, text nodes and comments with
    their content.

    """
    return '\n'.join(_pretty_lines(root, 0, indent))


def _pretty_lines(node, level, indent):
    prefix = indent * level
    type_ = node_type(node)
    if type_ == 'text':
        yield f'{prefix}{node.strip()!r}'
        return
    elif type_ == 'comment':
        yield f'{prefix}<!--{node.text}-->'
        return
    elif type_ == 'processing-instruction':
        yield f'{prefix}<?{node.text}?>'
        return

    attributes = ''.join(
        f' {name}="{value}"' for name, value in node.attrib.items())
    yield f'{prefix}<{node.tag}{attributes}>'
    if node.text and node.text.strip():
        yield from _pretty_lines(node.text, level + 1, indent)
    for child in node:
        yield from _pretty_lines(child, level + 1, indent)
        if child.tail and child.tail.strip():
            yield from _pretty_lines(child.tail, level + 1, indent)

