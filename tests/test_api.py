"""Test the public API."""

import io

import pytest

from boxprint import CSS, DEFAULT_OPTIONS, HTML, OutputError
from boxprint.css.units import UnknownUnit
from boxprint.document import Document
from boxprint.html import pretty_print
from boxprint.layout import LayoutError

from .draw import png_to_pixels
from .testing_utils import assert_no_logs, capture_logs

SOURCE = '<div style="width: 4px; height: 2px; background: red"></div>'
UNSTYLED_SOURCE = '<div style="width: 4px; height: 2px"></div>'
PNG_MAGIC_NUMBER = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'


def _assert_red_box(png):
    width, height, pixels = png_to_pixels(png)
    assert (width, height) == (6, 3)
    # Auto margins center the box.
    assert pixels[1] == (255, 0, 0)
    assert pixels[0] == (255, 255, 255)
    assert pixels[6 * 2 + 1] == (255, 255, 255)


@assert_no_logs
def test_html_parsing(tmp_path):
    filename = tmp_path / 'test.html'
    filename.write_text(SOURCE, encoding='utf-8')
    options = {'width': 6, 'height': 3}

    _assert_red_box(HTML(string=SOURCE).write_png(**options))
    _assert_red_box(HTML(filename=filename).write_png(**options))
    _assert_red_box(HTML(filename=str(filename)).write_png(**options))
    _assert_red_box(HTML(filename).write_png(**options))
    _assert_red_box(HTML(str(filename)).write_png(**options))
    with filename.open('rb') as fd:
        _assert_red_box(HTML(fd).write_png(**options))
    _assert_red_box(HTML(
        file_obj=io.BytesIO(SOURCE.encode())).write_png(**options))


@assert_no_logs
def test_html_encoding():
    source = '<p style="height: 1px">é</p>'.encode('latin-1')
    html = HTML(file_obj=io.BytesIO(source), encoding='latin-1')
    paragraph = html.etree_element.find('body/p')
    assert paragraph.text == 'é'


@assert_no_logs
def test_select_source():
    with pytest.raises(TypeError):
        HTML()
    with pytest.raises(TypeError):
        HTML(string=SOURCE, filename='test.html')
    with pytest.raises(TypeError):
        CSS()
    with pytest.raises(TypeError):
        CSS(string='', file_obj=io.BytesIO())


@assert_no_logs
def test_css_parsing(tmp_path):
    css = 'div { background: blue }'
    filename = tmp_path / 'test.css'
    filename.write_text(css, encoding='utf-8')
    for stylesheet in (
            CSS(string=css), CSS(filename=filename), CSS(filename),
            CSS(file_obj=io.BytesIO(css.encode())), str(filename), filename):
        png = HTML(string=UNSTYLED_SOURCE).write_png(
            width=6, height=3, stylesheets=[stylesheet])
        width, height, pixels = png_to_pixels(png)
        assert pixels[1] == (0, 0, 255)


@assert_no_logs
def test_style_attribute_wins():
    # The style attribute is more specific than any selector.
    css = CSS(string='div { background: blue }')
    canvas = HTML(string=SOURCE).render(
        width=6, height=3, stylesheets=[css]).paint()
    assert canvas.pixel(1, 0) == (255, 0, 0, 255)
    css = CSS(string='div { background: blue !important }')
    canvas = HTML(string=SOURCE).render(
        width=6, height=3, stylesheets=[css]).paint()
    assert canvas.pixel(1, 0) == (0, 0, 255, 255)


@assert_no_logs
def test_render():
    document = HTML(string=SOURCE).render()
    assert isinstance(document, Document)
    assert document.styled_root.tag == 'html'
    assert document.layout_root.element_tag == 'html'
    assert document.viewport.content.as_tuple() == (0, 0, 800, 600)
    assert document.options == DEFAULT_OPTIONS
    assert len(document.display_list()) == 1
    canvas = document.paint()
    assert (canvas.width, canvas.height) == (800, 600)


def test_unknown_option():
    with capture_logs() as logs:
        HTML(string=SOURCE).render(foo='bar')
    assert logs == ['WARNING: Unknown rendering option: foo.']


@assert_no_logs
def test_write_png(tmp_path):
    html = HTML(string=SOURCE)
    png = html.write_png()
    assert png.startswith(PNG_MAGIC_NUMBER)

    filename = tmp_path / 'test.png'
    assert html.write_png(filename) is None
    assert filename.read_bytes() == png

    file_obj = io.BytesIO()
    assert html.write_png(file_obj) is None
    assert file_obj.getvalue() == png


def test_write_png_error(tmp_path):
    with capture_logs() as logs:
        with pytest.raises(OutputError):
            HTML(string=SOURCE).write_png(tmp_path)
    message, = logs
    assert message.startswith('ERROR: Failed to write PNG to ')


@assert_no_logs
def test_write_all(tmp_path):
    document = HTML(string=SOURCE).render(width=6, height=3)
    png, pdf = document.write_all()
    _assert_red_box(png)
    assert pdf.startswith(b'%PDF-')

    png_filename = tmp_path / 'test.png'
    pdf_filename = tmp_path / 'test.pdf'
    assert document.write_all(png_filename, pdf_filename) == (None, None)
    assert png_filename.read_bytes() == png
    assert pdf_filename.read_bytes().startswith(b'%PDF-')


def test_write_all_errors(tmp_path, monkeypatch):
    def broken_pdf(self, target=None):
        raise RuntimeError('no PDF')

    document = HTML(string=SOURCE).render()
    missing = tmp_path / 'missing'
    monkeypatch.setattr(Document, 'write_pdf', broken_pdf)
    with capture_logs() as logs:
        with pytest.raises(OutputError):
            document.write_all(missing / 'test.png')
    pdf_message, png_message = sorted(logs)
    assert png_message.startswith('ERROR: Failed to write PNG to ')
    assert pdf_message == 'ERROR: Failed to write PDF: no PDF'

    # A single error is raised without being logged again.
    with capture_logs() as logs:
        with pytest.raises(RuntimeError):
            document.write_all()
    assert logs == []


@assert_no_logs
def test_layout_is_shared():
    document = HTML(string=SOURCE).render()
    before = [
        box.dimensions.border_box() for box in document.layout_root.descendants()]
    document.write_all()
    after = [
        box.dimensions.border_box() for box in document.layout_root.descendants()]
    assert before == after


@assert_no_logs
def test_fatal_errors():
    with pytest.raises(UnknownUnit):
        HTML(string='<p style="height: 1em">').render()
    with pytest.raises(LayoutError):
        HTML(string='<style>html { display: none }</style>').render()


@assert_no_logs
def test_pretty_print():
    html = HTML(string='<p class="a">Hello <!-- c --><em>world</em></p>')
    assert pretty_print(html.etree_element) == '\n'.join((
        '<html>',
        '  <head>',
        '  <body>',
        '    <p class="a">',
        "      'Hello'",
        '      <!-- c -->',
        '      <em>',
        "        'world'",
    ))
