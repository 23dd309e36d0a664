"""Render HTML and CSS boxes to PNG images and PDF documents.

Everything needed to render a document, HTML and CSS sources, options and
the document they produce, is importable from here.

"""

import contextlib
import os
import tempfile
from pathlib import Path

import cssselect2
import tinycss2

VERSION = __version__ = '1.0'

#: Rendering options shared by :meth:`HTML.render` and the ``boxprint``
#: command, with their default values.
#:
#: :param list stylesheets:
#:     An optional list of author stylesheets. The list can include
#:     :class:`CSS` objects, filenames, or file-like objects.
#: :param float width:
#:     Width of the viewport, in CSS pixels. It is the width of the PNG image
#:     and of the PDF page.
#: :param float height:
#:     Height of the viewport, in CSS pixels. It is the height of the PNG
#:     image and of the PDF page.
#: :param float zoom:
#:     The zoom factor in PDF units per CSS pixel.
#: :param bool uncompressed_pdf:
#:     Whether PDF content should be left uncompressed.
#: :param str pdf_version:
#:     A PDF version number.
DEFAULT_OPTIONS = {
    'stylesheets': None,
    'width': 800,
    'height': 600,
    'zoom': 1,
    'uncompressed_pdf': False,
    'pdf_version': None,
}

__all__ = [
    'CSS', 'DEFAULT_OPTIONS', 'HTML', 'VERSION', 'Document', 'OutputError',
    '__version__']


# The version is used by the modules imported from here.
from .logger import LOGGER, PROGRESS_LOGGER  # noqa: I001, E402
# Modules using HTML or CSS are imported at the end of the file.


class OutputError(OSError):
    """A PNG image or a PDF file can't be written to its target."""


class HTML:
    """HTML document parsed by tinyhtml5.

    The source is given either as a single positional argument, a filename
    or an object with a ``read`` method, or as exactly one of:

    :type filename: str or pathlib.Path
    :param filename:
        Path of an HTML file.
    :type file_obj: :term:`file object`
    :param file_obj:
        A binary file object.
    :param str string:
        A string of HTML source.

    :param str encoding:
        Character encoding of bytes sources, detected when missing.

    A :obj:`TypeError` is raised unless exactly one source is given.

    """
    def __init__(self, guess=None, filename=None, file_obj=None, string=None,
                 encoding=None):
        PROGRESS_LOGGER.info(
            'Step 1 - Parsing HTML - %s',
            guess or filename or getattr(file_obj, 'name', 'HTML string'))
        result = _select_source(guess, filename, file_obj, string)
        with result as (source_type, source):
            kwargs = {}
            if encoding is not None and not isinstance(source, str):
                kwargs['override_encoding'] = encoding
            self.etree_element = parse_html(source, **kwargs)

    def _ua_stylesheets(self):
        return [HTML5_UA_STYLESHEET]

    def render(self, **options):
        """Lay out the document, but do not (yet) export it.

        This returns a :class:`document.Document` object giving access to the
        styled tree and to the layout tree. See :meth:`write_png` and
        :meth:`write_pdf` to get outputs directly.

        :param options:
            The ``options`` parameter includes by default the
            :data:`DEFAULT_OPTIONS` values.
        :returns: A :class:`document.Document` object.

        """
        for unknown in set(options) - set(DEFAULT_OPTIONS):
            LOGGER.warning('Unknown rendering option: %s.', unknown)
        new_options = DEFAULT_OPTIONS.copy()
        new_options.update(options)
        options = new_options
        return Document._render(self, options)

    def write_png(self, target=None, **options):
        """Paint the document to a PNG image.

        This is a shortcut for calling :meth:`render`, then
        :meth:`Document.write_png() <document.Document.write_png>`.

        :returns:
            The PNG image as :obj:`bytes` if ``target`` is not provided or
            :obj:`None`, otherwise :obj:`None`.

        """
        return self.render(**options).write_png(target)

    def write_pdf(self, target=None, **options):
        """Render the document to a single-page PDF file.

        Same as :meth:`render` followed by
        :meth:`Document.write_pdf() <document.Document.write_pdf>`.

        :type target:
            :class:`str`, :class:`pathlib.Path` or :term:`file object`
        :param target:
            A filename where the PDF file is generated, a file object, or
            :obj:`None`.
        :param options:
            The ``options`` parameter includes by default the
            :data:`DEFAULT_OPTIONS` values.
        :returns:
            The PDF as :obj:`bytes` if ``target`` is not provided or
            :obj:`None`, otherwise :obj:`None` (the PDF is written to
            ``target``).

        """
        return self.render(**options).write_pdf(target)


class CSS:
    """Author or user-agent stylesheet, parsed by tinycss2.

    Sources are given like for :class:`HTML`, with the same
    arguments.

    ``CSS`` objects have no public methods. They are only meant to be used in
    the ``stylesheets`` option of :meth:`HTML.render` and
    :meth:`HTML.write_pdf`.

    """
    def __init__(self, guess=None, filename=None, file_obj=None, string=None,
                 encoding=None, matcher=None):
        PROGRESS_LOGGER.info(
            'Step 2 - Parsing CSS - %s',
            filename or getattr(file_obj, 'name', 'CSS string'))
        result = _select_source(guess, filename, file_obj, string)
        with result as (source_type, source):
            if source_type == 'file_obj':
                source = source.read()
            if isinstance(source, str):
                stylesheet = tinycss2.parse_stylesheet(
                    source, skip_comments=True, skip_whitespace=True)
            else:
                stylesheet, encoding = tinycss2.parse_stylesheet_bytes(
                    source, environment_encoding=encoding,
                    skip_comments=True, skip_whitespace=True)
        self.matcher = matcher or cssselect2.Matcher()
        preprocess_stylesheet(stylesheet, self.matcher)


@contextlib.contextmanager
def _select_source(guess=None, filename=None, file_obj=None, string=None):
    """If only one input is given, return it with its type."""
    selected_params = [
        param for param in (guess, filename, file_obj, string) if
        param is not None]
    if len(selected_params) != 1:
        source = ', '.join(
            str(param) for param in selected_params) or 'nothing'
        raise TypeError(f'Expected exactly one source, got {source}')
    elif guess is not None:
        if hasattr(guess, 'read'):
            type_ = 'file_obj'
        else:
            type_ = 'filename'
        with _select_source(**{type_: guess}) as result:
            yield result
    elif filename is not None:
        with open(filename, 'rb') as file_obj:
            yield 'file_obj', file_obj
    elif file_obj is not None:
        yield 'file_obj', file_obj
    else:
        assert string is not None
        yield 'string', string


def _write_target(data, target, output_type):
    """Write ``data`` bytes to ``target``, or return them if it is ``None``.

    Files are first written next to ``target`` in a temporary file, then
    moved onto ``target``. A failed write leaves ``target`` untouched.

    """
    if target is None:
        return data
    temporary = None
    try:
        if hasattr(target, 'write'):
            target.write(data)
        else:
            path = Path(target)
            with tempfile.NamedTemporaryFile(
                    dir=path.parent, prefix=f'.{path.name}.',
                    delete=False) as fd:
                temporary = fd.name
                fd.write(data)
            os.replace(temporary, path)
    except OSError as exception:
        LOGGER.error(
            'Failed to write %s to %s: %s', output_type, target, exception)
        if temporary is not None:
            with contextlib.suppress(OSError):
                os.remove(temporary)
        raise OutputError(
            f'Failed to write {output_type} to {target}') from exception


# Work around circular imports.
from .css import preprocess_stylesheet  # noqa: I001, E402
from .html import HTML5_UA_STYLESHEET, parse_html  # noqa: E402
from .document import Document  # noqa: E402
