"""Constants and helpers for units."""

# How many CSS pixels is one <unit>?
# https://www.w3.org/TR/CSS21/syndata.html#length-units
LENGTHS_TO_PIXELS = {
    'px': 1,
    'pt': 1 / 0.75,
    'pc': 16,
    'in': 96,
    'cm': 96 / 2.54,
    'mm': 96 / 25.4,
    'q': 96 / 25.4 / 4,
}

ABSOLUTE_UNITS = set(LENGTHS_TO_PIXELS)


class UnknownUnit(ValueError):  # noqa: N818
    """Length given with a unit that can't be converted to pixels.

    This error is fatal: it is never turned into a warning.

    """


def check_unit(unit, property_name=None):
    """Return the lower-case ``unit``, raise :class:`UnknownUnit` if unknown."""
    lower_unit = unit.lower()
    if lower_unit not in ABSOLUTE_UNITS:
        where = f' for {property_name!r}' if property_name else ''
        raise UnknownUnit(f'Unrecognized unit {unit!r}{where}')
    return lower_unit


def to_pixels(value, property_name=None):
    """Get number of pixels corresponding to a length.

    Keywords (``auto`` included) and missing values count as zero.

    """
    if value is None or isinstance(value, str):
        return 0
    elif isinstance(value, (int, float)):
        return value
    unit = check_unit(value.unit, property_name)
    if unit == 'px':
        return value.value
    return value.value * LENGTHS_TO_PIXELS[unit]
