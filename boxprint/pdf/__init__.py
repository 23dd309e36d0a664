"""PDF generation management.

The PDF has a single page, the size of the viewport, with one content stream
filling a rectangle per display list item.

"""

import io

import pydyf

from .. import VERSION, _write_target
from ..draw import build_display_list
from ..logger import PROGRESS_LOGGER
from .stream import Stream

DEFAULT_VERSION = b'1.7'


def generate_pdf(layout_root, bounds, zoom=1, compress=False):
    """Return a :class:`pydyf.PDF` drawing ``layout_root``.

    ``bounds`` is the :class:`Rect` of the viewport, its size is the size of
    the page in CSS pixels. ``zoom`` is the number of PDF units per CSS pixel.
    ``compress`` compresses the content stream.

    """
    PROGRESS_LOGGER.info('Step 6 - Creating PDF')

    pdf = pydyf.PDF()
    page_width = bounds.width * zoom
    page_height = bounds.height * zoom

    graphics_state = pydyf.Dictionary({
        'Type': '/ExtGState',
        'CA': 1,
        'ca': 1,
    })
    pdf.add_object(graphics_state)
    resources = pydyf.Dictionary({
        'ExtGState': pydyf.Dictionary({'s0': graphics_state.reference}),
    })

    stream = Stream(bounds.height, zoom, compress=compress)
    stream.set_state('s0')
    for item in build_display_list(layout_root):
        stream.fill_rectangle(item.color, item.rect)
    pdf.add_object(stream)

    pdf.add_page(pydyf.Dictionary({
        'Type': '/Page',
        'Parent': pdf.pages.reference,
        'MediaBox': pydyf.Array([0, 0, page_width, page_height]),
        'Contents': stream.reference,
        'Resources': resources,
    }))

    pdf.info['Producer'] = pydyf.String(f'boxprint {VERSION}')
    return pdf


def write_pdf(layout_root, bounds, target=None, zoom=1, compress=False,
              version=None):
    """Write the PDF drawing ``layout_root`` to ``target``.

    The whole document, cross-reference table and trailer included, is
    serialized in memory before anything is written to ``target``.

    :type target:
        :class:`str`, :class:`pathlib.Path` or :term:`file object`
    :param target:
        A filename where the PDF file is generated, a file object, or
        :obj:`None`.
    :param str version:
        The PDF version number, ``1.7`` by default.
    :returns:
        The PDF as :obj:`bytes` if ``target`` is not provided or
        :obj:`None`, otherwise :obj:`None`.
    :raises: :class:`boxprint.OutputError` if ``target`` can't be written.

    """
    pdf = generate_pdf(layout_root, bounds, zoom, compress)
    version = DEFAULT_VERSION if version is None else str(version).encode()
    output = io.BytesIO()
    # Only the content stream is compressed, objects are listed in a classic
    # cross-reference table.
    pdf.write(output, version)
    return _write_target(output.getvalue(), target, 'PDF')
