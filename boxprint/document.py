"""Document: a laid out box tree and its PNG and PDF outputs."""

from concurrent.futures import ThreadPoolExecutor

from . import CSS, DEFAULT_OPTIONS, LOGGER, OutputError
from .css import style_tree
from .draw import build_display_list
from .formatting_structure.boxes import Dimensions, Rect
from .layout import layout_tree
from .pdf import write_pdf
from .raster import paint


class Document:
    """A laid out document ready to be painted or written as PDF.

    Typically obtained from :meth:`HTML.render() <boxprint.HTML.render>`, but
    can also be instantiated directly with a styled tree, its layout tree and
    the viewport they were laid out in.

    The layout tree is never modified once the document is created: the PNG
    and PDF outputs can be generated at the same time.

    """

    @classmethod
    def _render(cls, html, options):
        stylesheets = []
        for css in options['stylesheets'] or []:
            if not hasattr(css, 'matcher'):
                css = CSS(guess=css)
            stylesheets.append(css)
        styled_root = style_tree(
            html.etree_element, stylesheets, html._ua_stylesheets())
        viewport = Dimensions(Rect(0, 0, options['width'], options['height']))
        layout_root = layout_tree(styled_root, viewport)
        return cls(styled_root, layout_root, viewport, options)

    def __init__(self, styled_root, layout_root, viewport, options=None):
        #: The :class:`css.StyledNode` tree of the document.
        self.styled_root = styled_root
        #: The root :class:`LayoutBox` of the laid out box tree.
        self.layout_root = layout_root
        #: The :class:`Dimensions` of the viewport, its content rectangle is
        #: the size of the PNG image and of the PDF page.
        self.viewport = viewport
        new_options = DEFAULT_OPTIONS.copy()
        new_options.update(options or {})
        self.options = new_options

    def display_list(self):
        """Return the list of drawing commands of the document."""
        return build_display_list(self.layout_root)

    def paint(self):
        """Paint the document and return a :class:`raster.Canvas`."""
        return paint(self.layout_root, self.viewport.content)

    def write_png(self, target=None):
        """Paint the document in a PNG image.

        :type target:
            :class:`str`, :class:`pathlib.Path` or :term:`file object`
        :param target:
            A filename where the PNG image is generated, a file object, or
            :obj:`None`.
        :returns:
            The PNG image as :obj:`bytes` if ``target`` is not provided or
            :obj:`None`, otherwise :obj:`None`.

        """
        return self.paint().write_png(target)

    def write_pdf(self, target=None, zoom=None):
        """Paint the document in a single-page PDF file.

        :type target:
            :class:`str`, :class:`pathlib.Path` or :term:`file object`
        :param target:
            A filename where the PDF file is generated, a file object, or
            :obj:`None`.
        :param float zoom:
            The zoom factor in PDF units per CSS pixel, the ``zoom`` option
            by default.
        :returns:
            The PDF as :obj:`bytes` if ``target`` is not provided or
            :obj:`None`, otherwise :obj:`None` (the PDF is written to
            ``target``).

        """
        options = self.options
        if zoom is None:
            zoom = options['zoom']
        return write_pdf(
            self.layout_root, self.viewport.content, target, zoom,
            compress=not options['uncompressed_pdf'],
            version=options['pdf_version'])

    def write_all(self, png_target=None, pdf_target=None):
        """Write the PNG image and the PDF file concurrently.

        Both outputs are generated from the same layout tree, in two threads.

        :returns:
            A ``(png, pdf)`` tuple, each item being the output :obj:`bytes`
            when its target is :obj:`None`, and :obj:`None` otherwise.
        :raises:
            The error of the PNG output if both fail, the PDF error is
            logged.

        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            png = executor.submit(self.write_png, png_target)
            pdf = executor.submit(self.write_pdf, pdf_target)
        png_error, pdf_error = png.exception(), pdf.exception()
        if png_error is not None and pdf_error is not None:
            # Output errors are logged when they are raised.
            if not isinstance(pdf_error, OutputError):
                LOGGER.error('Failed to write PDF: %s', pdf_error)
            raise png_error
        return png.result(), pdf.result()
