"""Test PDF-related code, including the cross-reference table."""

import io
import re

import pytest

from boxprint import HTML, OutputError
from boxprint.formatting_structure.boxes import Rect
from boxprint.pdf import generate_pdf, write_pdf

from .testing_utils import assert_no_logs, capture_logs, render

SOURCE = '''
  <div style="width: 100px; height: 50px; margin: 10px;
              background-color: #ff0000"></div>
'''


def xref_offsets(pdf):
    """Return the list of object offsets of the xref table of ``pdf``."""
    start = int(re.search(rb'startxref\s+(\d+)', pdf).group(1))
    assert pdf[start:].startswith(b'xref')
    table = pdf[start:pdf.index(b'trailer', start)]
    return [
        int(offset) for offset, _, _ in
        re.findall(rb'(\d{10}) (\d{5}) ([fn])', table)]


@assert_no_logs
def test_page_size():
    pdf = HTML(string=SOURCE).write_pdf(uncompressed_pdf=True)
    assert pdf.startswith(b'%PDF-1.7')
    assert b'/MediaBox [0 0 800 600]' in pdf
    assert pdf.count(b'/Type /Page\n') == 1


@assert_no_logs
def test_rectangle():
    pdf = HTML(string=SOURCE).write_pdf(uncompressed_pdf=True)
    assert b'1 0 0 rg' in pdf
    # The y axis goes up in PDF: 600 - 10 - 50 = 540.
    assert b'10 540 100 50 re\nf' in pdf


@assert_no_logs
def test_zoom():
    document = render(SOURCE, uncompressed_pdf=True)
    pdf = document.write_pdf(zoom=2)
    assert b'/MediaBox [0 0 1600 1200]' in pdf
    assert b'20 1080 200 100 re' in pdf


@assert_no_logs
def test_zoom_option():
    pdf = HTML(string=SOURCE).write_pdf(zoom=0.5, uncompressed_pdf=True)
    assert b'/MediaBox [0 0 400 300]' in pdf
    assert b'5 270 50 25 re' in pdf


@assert_no_logs
def test_viewport_size():
    pdf = HTML(string=SOURCE).write_pdf(
        width=200, height=100, uncompressed_pdf=True)
    assert b'/MediaBox [0 0 200 100]' in pdf
    assert b'10 40 100 50 re' in pdf


@assert_no_logs
def test_borders_order():
    pdf = HTML(string='''
      <div style="width: 4px; height: 2px; margin: 0;
                  border: 1px solid blue; background: red"></div>
    ''').write_pdf(width=10, height=10, uncompressed_pdf=True)
    rectangles = re.findall(rb'([\d.]+ [\d.]+ [\d.]+ [\d.]+) re', pdf)
    assert rectangles == [
        b'1 7 4 2', b'0 9 6 1', b'5 6 1 4', b'0 6 6 1', b'0 6 1 4']
    # The color is only set when it changes.
    assert pdf.count(b'0 0 1 rg') == 1


@assert_no_logs
def test_graphics_state():
    pdf = HTML(string=SOURCE).write_pdf(uncompressed_pdf=True)
    assert b'/Type /ExtGState' in pdf
    assert b'/ExtGState' in pdf
    assert b'/s0 ' in pdf
    assert b'/s0 gs' in pdf


@assert_no_logs
def test_producer():
    pdf = HTML(string=SOURCE).write_pdf(uncompressed_pdf=True)
    assert b'/Producer (boxprint ' in pdf


@assert_no_logs
@pytest.mark.parametrize('uncompressed_pdf', (False, True))
def test_xref_table(uncompressed_pdf):
    pdf = HTML(string=SOURCE).write_pdf(uncompressed_pdf=uncompressed_pdf)
    offsets = xref_offsets(pdf)
    for number, offset in enumerate(offsets[1:], start=1):
        assert pdf[offset:].startswith(f'{number} 0 obj'.encode())


@assert_no_logs
@pytest.mark.parametrize('uncompressed_pdf', (False, True))
def test_trailer_root(uncompressed_pdf):
    pdf = HTML(string=SOURCE).write_pdf(uncompressed_pdf=uncompressed_pdf)
    trailer = pdf[pdf.rindex(b'trailer'):]
    root = int(re.search(rb'/Root (\d+) 0 R', trailer).group(1))
    offset = xref_offsets(pdf)[root]
    catalog = pdf[offset:pdf.index(b'endobj', offset)]
    assert catalog.startswith(f'{root} 0 obj'.encode())
    assert b'/Type /Catalog' in catalog


@assert_no_logs
def test_default_version():
    pdf = HTML(string=SOURCE).write_pdf()
    assert pdf.startswith(b'%PDF-1.7\n')
    assert render(SOURCE).write_pdf().startswith(b'%PDF-1.7\n')


@assert_no_logs
def test_compressed():
    pdf = HTML(string=SOURCE).write_pdf()
    assert pdf.startswith(b'%PDF-')
    assert pdf.rstrip().endswith(b'%%EOF')
    assert b'10 540 100 50 re' not in pdf
    assert b'/Filter /FlateDecode' in pdf
    # Compressed object streams would replace the table.
    assert b'/ObjStm' not in pdf
    assert b'/Type /XRef' not in pdf


@assert_no_logs
def test_pdf_version():
    pdf = HTML(string=SOURCE).write_pdf(
        pdf_version='1.4', uncompressed_pdf=True)
    assert pdf.startswith(b'%PDF-1.4')


@assert_no_logs
def test_no_boxes_drawn():
    pdf = HTML(string='<p>').write_pdf(uncompressed_pdf=True)
    assert b' re' not in pdf
    assert b'/s0 gs' in pdf


@assert_no_logs
def test_generate_pdf():
    document = render(SOURCE)
    pdf = generate_pdf(document.layout_root, Rect(0, 0, 20, 20))
    assert pdf.pages['Count'] == 1
    output = io.BytesIO()
    pdf.write(output)
    assert b'/MediaBox [0 0 20 20]' in output.getvalue()


@assert_no_logs
def test_write_pdf_targets(tmp_path):
    document = render(SOURCE)
    bounds = document.viewport.content
    pdf = write_pdf(document.layout_root, bounds)

    path = tmp_path / 'test.pdf'
    assert write_pdf(document.layout_root, bounds, path) is None
    assert path.read_bytes() == pdf

    file_obj = io.BytesIO()
    assert write_pdf(document.layout_root, bounds, file_obj) is None
    assert file_obj.getvalue() == pdf

    assert document.write_pdf(str(path)) is None
    assert path.read_bytes().startswith(b'%PDF-')


def test_write_error(tmp_path):
    document = render(SOURCE)
    with capture_logs() as logs:
        with pytest.raises(OutputError):
            document.write_pdf(tmp_path)
    message, = logs
    assert message.startswith('ERROR: Failed to write PDF to ')


def test_write_error_missing_directory(tmp_path):
    class BrokenFile(io.BytesIO):
        def write(self, data):
            raise OSError('disk full')

    document = render(SOURCE)
    with capture_logs() as logs:
        with pytest.raises(OutputError):
            document.write_pdf(BrokenFile())
    assert len(logs) == 1

    target = tmp_path / 'missing' / 'test.pdf'
    with capture_logs() as logs:
        with pytest.raises(OutputError):
            document.write_pdf(target)
    assert len(logs) == 1
    assert not target.exists()


def test_write_error_keeps_existing_file(tmp_path, monkeypatch):
    def broken_replace(source, destination):
        raise OSError('disk full')

    target = tmp_path / 'test.pdf'
    target.write_bytes(b'previous content')
    document = render(SOURCE)
    monkeypatch.setattr('os.replace', broken_replace)
    with capture_logs() as logs:
        with pytest.raises(OutputError):
            document.write_pdf(target)
    message, = logs
    assert message.endswith('disk full')
    assert target.read_bytes() == b'previous content'
    # The temporary file is removed.
    assert [path.name for path in tmp_path.iterdir()] == ['test.pdf']


@assert_no_logs
def test_overwrite_file(tmp_path):
    target = tmp_path / 'test.pdf'
    target.write_bytes(b'previous content')
    pdf = render(SOURCE).write_pdf()
    render(SOURCE).write_pdf(target)
    assert target.read_bytes() == pdf
    assert [path.name for path in tmp_path.iterdir()] == ['test.pdf']
