"""Validate properties and expand shorthands.

See https://www.w3.org/TR/CSS21/propidx.html

"""

import functools

from tinycss2 import serialize
from tinycss2.color3 import parse_color

from ..logger import LOGGER
from .properties import (
    BORDER_STYLE_KEYWORDS, BORDER_WIDTH_KEYWORDS, KNOWN_PROPERTIES, SIDES,
    ZERO_PIXELS, Dimension)
from .units import check_unit

# Maps property names to functions taking a token list and returning a value,
# or None for invalid.
PROPERTIES = {}

# Maps shorthand property names to functions taking a token list and a
# property name, yielding ``(name, value)`` tuples.
EXPANDERS = {}


class InvalidValues(ValueError):  # noqa: N818
    """A declaration value that no validator accepts."""


def remove_whitespace(tokens):
    """Return the tokens of ``tokens`` that are not whitespace or comments."""
    return tuple(
        token for token in tokens
        if token.type not in ('whitespace', 'comment'))


def get_keyword(token):
    """Return the lower-case name of an ident ``token``, or ``None``."""
    if token.type == 'ident':
        return token.lower_value


def get_length(token, negative=True, property_name=None):
    """Parse a <length> token.

    Lengths with a unit that can't be converted to pixels raise
    :class:`UnknownUnit`, percentages included.

    """
    if token.type == 'dimension':
        unit = check_unit(token.unit, property_name)
        if negative or token.value >= 0:
            return Dimension(token.value, unit)
    elif token.type == 'percentage':
        check_unit('%', property_name)
    elif token.type == 'number' and token.value == 0:
        return ZERO_PIXELS


def property(property_name):
    """Register the decorated function as the validator of ``property_name``."""
    def decorator(function):
        assert property_name in KNOWN_PROPERTIES, property_name
        assert property_name not in PROPERTIES, property_name
        PROPERTIES[property_name] = function
        return function
    return decorator


def expander(property_name):
    """Register the decorated function as the expander of ``property_name``."""
    def decorator(function):
        assert property_name not in EXPANDERS, property_name
        EXPANDERS[property_name] = function
        return function
    return decorator


def single_token(function):
    """Make ``function`` reject values that are not exactly one token."""
    @functools.wraps(function)
    def validator(tokens, *args):
        if len(tokens) == 1:
            return function(tokens[0], *args)
    return validator


# Validators

@property('display')
@single_token
def display(token, name):
    """``display`` property validation.

    Only ``block`` and ``none`` change the generated boxes, any other keyword
    generates an inline box.

    """
    return get_keyword(token)


@property('width')
@property('height')
@single_token
def width_height(token, name):
    """``width`` and ``height``: ``auto`` or a non-negative length."""
    if get_keyword(token) == 'auto':
        return 'auto'
    return get_length(token, negative=False, property_name=name)


@property('margin-top')
@property('margin-right')
@property('margin-bottom')
@property('margin-left')
@single_token
def margin(token, name):
    """``margin-*``: ``auto`` or any length."""
    if get_keyword(token) == 'auto':
        return 'auto'
    return get_length(token, property_name=name)


@property('padding-top')
@property('padding-right')
@property('padding-bottom')
@property('padding-left')
@single_token
def padding(token, name):
    """``padding-*``: a non-negative length."""
    return get_length(token, negative=False, property_name=name)


@property('border-top-width')
@property('border-right-width')
@property('border-bottom-width')
@property('border-left-width')
@single_token
def border_width(token, name):
    """``border-*-width``: a keyword or a non-negative length."""
    keyword = get_keyword(token)
    if keyword in BORDER_WIDTH_KEYWORDS:
        return Dimension(BORDER_WIDTH_KEYWORDS[keyword], 'px')
    return get_length(token, negative=False, property_name=name)


@property('border-top-style')
@property('border-right-style')
@property('border-bottom-style')
@property('border-left-style')
@single_token
def border_style(token, name):
    """``border-*-style``, parsed but not painted."""
    if (keyword := get_keyword(token)) in BORDER_STYLE_KEYWORDS:
        return keyword


@property('background-color')
@property('border-top-color')
@property('border-right-color')
@property('border-bottom-color')
@property('border-left-color')
@single_token
def other_colors(token, name):
    color = parse_color(token)
    if color != 'currentColor':
        return color


def validate_non_shorthand(tokens, name):
    """Validate a longhand property with its registered validator."""
    if name not in KNOWN_PROPERTIES:
        suggestion = name.replace('_', '-')
        if suggestion in KNOWN_PROPERTIES:
            raise InvalidValues(f'did you mean {suggestion}?')
        raise InvalidValues('unknown property')

    value = PROPERTIES[name](tokens, name)
    if value is None:
        raise InvalidValues
    return ((name, value),)


# Expanders

@expander('margin')
@expander('padding')
@expander('border-width')
@expander('border-color')
@expander('border-style')
def expand_four_sides(tokens, name):
    """Expand 1 to 4 values to the top, right, bottom and left longhands."""
    prefix, _, suffix = name.partition('-')
    # border-color gives border-top-color, margin gives margin-top.
    longhand_names = [
        '-'.join(filter(None, (prefix, side, suffix))) for side in SIDES]

    if not 1 <= len(tokens) <= 4:
        raise InvalidValues(
            f'Expected 1 to 4 token components got {len(tokens)}')
    # Indexes of the value used by each side, per number of values.
    indexes = {1: (0, 0, 0, 0), 2: (0, 1, 0, 1), 3: (0, 1, 2, 1), 4: (0, 1, 2, 3)}
    for longhand_name, index in zip(longhand_names, indexes[len(tokens)]):
        (longhand,) = validate_non_shorthand([tokens[index]], longhand_name)
        yield longhand


@expander('border')
@expander('border-top')
@expander('border-right')
@expander('border-bottom')
@expander('border-left')
def expand_border(tokens, name):
    """Expand the ``border`` and ``border-*`` shorthand properties.

    Width, style and color can come in any order. Missing parts reset the
    width to zero, the style to ``none`` and remove the color.

    """
    sides = SIDES if name == 'border' else (name.split('-')[1],)
    width = style = color = None
    for token in tokens:
        if width is None and border_width([token], f'{name}-width'):
            width = border_width([token], f'{name}-width')
        elif style is None and border_style([token], f'{name}-style'):
            style = border_style([token], f'{name}-style')
        elif color is None and other_colors([token], f'{name}-color'):
            color = other_colors([token], f'{name}-color')
        else:
            raise InvalidValues
    for side in sides:
        yield f'border-{side}-width', ZERO_PIXELS if width is None else width
        yield f'border-{side}-style', 'none' if style is None else style
        yield f'border-{side}-color', color


@expander('background')
def expand_background(tokens, name):
    """Expand the ``background`` shorthand property, colors only."""
    if len(tokens) == 1 and get_keyword(tokens[0]) == 'none':
        yield 'background-color', parse_color('transparent')
        return
    yield from validate_non_shorthand(tokens, 'background-color')


def preprocess_declarations(declarations):
    """Expand shorthand properties, filter unsupported properties and values.

    Log a warning for every ignored declaration. Unknown length units are not
    ignored, :class:`UnknownUnit` is raised.

    Return a iterable of ``(name, value, important)`` tuples.

    """
    for declaration in declarations:
        if declaration.type == 'error':
            LOGGER.warning(
                'Error: %s at %d:%d.',
                declaration.message,
                declaration.source_line, declaration.source_column)

        if declaration.type != 'declaration':
            continue

        name = declaration.lower_name

        def validation_error(level, reason):
            getattr(LOGGER, level)(
                'Ignored `%s:%s` at %d:%d, %s.',
                declaration.name, serialize(declaration.value),
                declaration.source_line, declaration.source_column, reason)

        if name.startswith('-'):
            validation_error('debug', 'prefixed properties are ignored')
            continue

        expander_ = EXPANDERS.get(name, validate_non_shorthand)
        tokens = remove_whitespace(declaration.value)
        try:
            # Having no tokens is allowed by grammar but refused by all
            # properties and expanders.
            if not tokens:
                raise InvalidValues('no value')
            # Use list() to consume generators now and catch any error.
            result = list(expander_(tokens, name))
        except InvalidValues as exc:
            validation_error(
                'warning',
                exc.args[0] if exc.args and exc.args[0] else 'invalid value')
            continue

        important = declaration.important
        for long_name, value in result:
            yield long_name.replace('-', '_'), value, important
