"""Test the final, drawn results and compare PNG images pixel per pixel."""

import io
import os
from itertools import zip_longest

from PIL import Image

from boxprint import HTML

PIXELS_BY_CHAR = dict(
    _=(255, 255, 255),  # white
    R=(255, 0, 0),  # red
    B=(0, 0, 255),  # blue
    G=(0, 255, 0),  # lime green
    K=(0, 0, 0),  # black
    g=(0, 128, 0),  # half green
    z=None,
)


def parse_pixels(pixels):
    lines = (line.split('#')[0].strip() for line in pixels.splitlines())
    lines = tuple(line for line in lines if line)
    widths = {len(line) for line in lines}
    assert len(widths) == 1, 'All lines of pixels must have the same width'
    width = widths.pop()
    height = len(lines)
    pixels = tuple(PIXELS_BY_CHAR[char] for line in lines for char in line)
    return width, height, pixels


def assert_pixels(name, expected_pixels, html):
    """Helper testing the size of the image and the pixels values.

    The viewport has the size of ``expected_pixels``.

    """
    expected_width, expected_height, expected_pixels = parse_pixels(
        expected_pixels)
    width, height, pixels = html_to_pixels(
        html, expected_width, expected_height)
    assert (expected_width, expected_height) == (width, height), (
        'Images do not have the same sizes:\n'
        f'- expected: {expected_width} × {expected_height}\n'
        f'- result: {width} × {height}')
    assert_pixels_equal(name, width, height, pixels, expected_pixels)


def assert_pixels_equal(name, width, height, raw, expected_raw):
    """Take 2 matrices of pixels and assert that they are the same."""
    if raw != expected_raw:  # pragma: no cover
        pixels = zip_longest(raw, expected_raw, fillvalue=(-1, -1, -1))
        for i, (value, expected) in enumerate(pixels):
            if expected is None:
                continue
            if value != expected:
                write_png(name, raw, width, height)
                x = i % width
                y = i // width
                assert 0, (
                    f'Pixel ({x}, {y}) in {name}: '
                    f'expected rgb{expected}, got rgb{value}')


def write_png(basename, pixels, width, height):  # pragma: no cover
    """Take a pixel matrix and write a PNG file."""
    directory = os.path.join(os.path.dirname(__file__), 'results')
    if not os.path.isdir(directory):
        os.mkdir(directory)
    filename = os.path.join(directory, f'{basename}.png')
    image = Image.new('RGB', (width, height))
    image.putdata(pixels)
    image.save(filename)


def html_to_pixels(html, width, height):
    """Render an HTML document to PNG, and return its size and pixel data."""
    document = HTML(string=html).render(width=width, height=height)
    return png_to_pixels(document.write_png())


def png_to_pixels(png):
    """Return the size and the RGB pixels of ``png`` bytes."""
    image = Image.open(io.BytesIO(png)).convert('RGB')
    data = image.tobytes()
    pixels = tuple(
        tuple(data[i:i + 3]) for i in range(0, len(data), 3))
    return image.width, image.height, pixels
