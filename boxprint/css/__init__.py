"""Turn an HTML tree and its stylesheets into a styled tree.

This module takes care of steps 2 and 3 of “CSS 2.1 processing model”:
Retrieve stylesheets associated with a document and annotate every node
of the document with the specified value for each supported CSS property.

https://www.w3.org/TR/CSS21/intro.html#processing-model

The cascade is simple: there is no inheritance, as none of the supported
properties is inherited, and no computed values, as the layout works directly
on specified values.

"""

from xml.etree import ElementTree

import cssselect2
import tinycss2

from .. import CSS
from ..logger import LOGGER, PROGRESS_LOGGER
from .properties import FOUR_SIDES_FALLBACKS, INITIAL_VALUES
from .validation import preprocess_declarations

# Specificity of the style attribute, higher than any selector's.
STYLE_ATTRIBUTE_SPECIFICITY = (1, 0, 0, 0)


def node_type(node):
    """Return the DOM type of ``node``.

    Text nodes are plain strings, other nodes are ElementTree elements.

    """
    if isinstance(node, str):
        return 'text'
    elif node.tag is ElementTree.Comment:
        return 'comment'
    elif node.tag is ElementTree.ProcessingInstruction:
        return 'processing-instruction'
    return 'element'


class StyledNode:
    """A document node, its specified values and its styled children.

    ``specified_values`` maps property names, with underscores instead of
    hyphens, to specified values. Text, comment and processing instruction
    nodes have an empty mapping.

    """
    def __init__(self, node, specified_values=None, children=None):
        self.node = node
        self.specified_values = {
            name.replace('-', '_'): value
            for name, value in (specified_values or {}).items()}
        self.children = [] if children is None else list(children)

    def __repr__(self):
        return f'<{type(self).__name__} {self.tag}>'

    @property
    def tag(self):
        """Element tag, or ``#text``, ``#comment`` or ``#pi`` for others."""
        type_ = node_type(self.node)
        if type_ == 'element':
            return self.node.tag
        elif type_ == 'processing-instruction':
            return '#pi'
        return f'#{type_}'

    def value(self, name):
        """Get the specified value for ``name``, or ``None`` if unset."""
        return self.specified_values.get(name.replace('-', '_'))

    def lookup(self, name, fallback_name, default):
        """Get the value for ``name``, then ``fallback_name``, then ``default``."""
        value = self.value(name)
        if value is None:
            value = self.value(fallback_name)
        return default if value is None else value

    def __getitem__(self, name):
        """Get the specified value for ``name``, or its initial value.

        Per-side properties fall back to their four-sides shorthand.

        """
        name = name.replace('-', '_')
        fallback_name = FOUR_SIDES_FALLBACKS.get(name, name)
        return self.lookup(name, fallback_name, INITIAL_VALUES.get(name))

    def display(self):
        """Return ``'block'``, ``'none'`` or ``'inline'``."""
        display = self.value('display')
        if display in ('block', 'none'):
            return display
        return 'inline'


def declaration_precedence(origin, importance):
    """Return the precedence for a declaration.

    Precedence values have no meaning unless compared to each other.

    ``origin`` is ``'user agent'`` or ``'author'``, there are no user
    stylesheets.

    """
    # See https://www.w3.org/TR/CSS21/cascade.html#cascading-order
    if origin == 'user agent':
        return 1
    assert origin == 'author', origin
    return 3 if importance else 2


def add_declaration(cascaded_styles, name, value, weight):
    """Set the value for a property if it has a higher weight."""
    old_weight = cascaded_styles.get(name, (None, None))[1]
    if old_weight is None or old_weight <= weight:
        cascaded_styles[name] = value, weight


def preprocess_stylesheet(stylesheet_rules, matcher):
    """Add the selectors and declarations of ``stylesheet_rules`` to ``matcher``.

    Rules that can't be used are ignored with a warning.

    """
    for rule in stylesheet_rules:
        if rule.type == 'error':
            LOGGER.warning(
                'Parse error at %d:%d: %s',
                rule.source_line, rule.source_column, rule.message)
            continue
        elif rule.type == 'at-rule':
            LOGGER.warning(
                'Unsupported rule @%s at %d:%d, the whole rule was ignored.',
                rule.at_keyword, rule.source_line, rule.source_column)
            continue
        elif rule.type != 'qualified-rule':
            continue

        try:
            selectors = cssselect2.compile_selector_list(rule.prelude)
        except cssselect2.SelectorError as exc:
            LOGGER.warning('Invalid or unsupported selector, %s', exc)
            continue
        contents = tinycss2.parse_blocks_contents(
            rule.content, skip_comments=True, skip_whitespace=True)
        declarations = list(preprocess_declarations(contents))
        if not declarations:
            continue
        for selector in selectors:
            if selector.pseudo_element is not None:
                LOGGER.warning(
                    'Ignored rule %r, pseudo-elements are not supported.',
                    tinycss2.serialize(rule.prelude).strip())
                continue
            matcher.add_selector(selector, declarations)


def find_style_attributes(root):
    """Yield ``(element, declarations)`` for elements with a style attribute."""
    for element in root.iter():
        if node_type(element) != 'element':
            continue
        if style_attribute := element.get('style'):
            declarations = tinycss2.parse_blocks_contents(
                style_attribute, skip_comments=True, skip_whitespace=True)
            yield element, list(preprocess_declarations(declarations))


def get_cascaded_styles(root, sheets):
    """Return a dict mapping elements to their cascaded declarations.

    ``sheets`` is a list of ``(sheet, origin)`` tuples, where ``sheet`` has a
    ``matcher`` attribute. For each property, the declaration with the highest
    ``(precedence, specificity)`` weight wins. Matching rules are applied by
    increasing specificity, then in source order, so that on equal weights
    the last declaration wins.

    """
    cascaded_styles = {}
    wrapper = cssselect2.ElementWrapper.from_html_root(root)
    for element in wrapper.iter_subtree():
        style = cascaded_styles.setdefault(element.etree_element, {})
        for sheet, origin in sheets:
            for specificity, _, _, declarations in (
                    sheet.matcher.match(element)):
                for name, value, importance in declarations:
                    precedence = declaration_precedence(origin, importance)
                    weight = (precedence, specificity)
                    add_declaration(style, name, value, weight)

    for element, declarations in find_style_attributes(root):
        style = cascaded_styles.setdefault(element, {})
        for name, value, importance in declarations:
            precedence = declaration_precedence('author', importance)
            weight = (precedence, STYLE_ATTRIBUTE_SPECIFICITY)
            add_declaration(style, name, value, weight)

    return {
        element: {name: value for name, (value, _) in style.items()}
        for element, style in cascaded_styles.items()}


def _styled_node(node, cascaded_styles):
    """Build the styled tree for ``node`` and its descendants."""
    if node_type(node) != 'element':
        return StyledNode(node)
    children = []
    if node.text and node.text.strip():
        children.append(StyledNode(node.text))
    for child in node:
        children.append(_styled_node(child, cascaded_styles))
        if child.tail and child.tail.strip():
            children.append(StyledNode(child.tail))
    return StyledNode(node, cascaded_styles.get(node, {}), children)


def find_stylesheets(root):
    """Yield the stylesheets of the ``<style>`` elements in ``root``."""
    for element in root.iter('style'):
        mime_type = element.get('type', 'text/css').split(';', 1)[0].strip()
        # Only keep 'text/css' or an empty type.
        if mime_type not in ('text/css', ''):
            LOGGER.warning('Ignored <style> element of type %r', mime_type)
            continue
        content = ''.join(element.itertext())
        yield CSS(string=content)


def style_tree(root, stylesheets=(), ua_stylesheets=()):
    """Return the :class:`StyledNode` tree for the ``root`` element.

    The stylesheets of the ``<style>`` elements of the document come first,
    then ``stylesheets``. They have the author origin, ``ua_stylesheets``
    have the user agent origin. Every node of the tree gets a mapping,
    possibly empty.

    """
    author_stylesheets = [*find_stylesheets(root), *stylesheets]
    PROGRESS_LOGGER.info('Step 3 - Applying CSS')
    sheets = [
        *((sheet, 'user agent') for sheet in ua_stylesheets),
        *((sheet, 'author') for sheet in author_stylesheets)]
    cascaded_styles = get_cascaded_styles(root, sheets)
    return _styled_node(root, cascaded_styles)
