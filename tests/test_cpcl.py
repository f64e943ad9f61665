"""Tests for the CPCL job serializer and the label preview."""

from PIL import Image

from scanprint_service.labels.cpcl import render, render_test_label, serialize
from scanprint_service.labels.layout import compute_layout
from scanprint_service.labels.preview import MAX_SCALE, render_preview, render_preview_png
from scanprint_service.models import LabelConfiguration


def test_render_default_label():
    layout = compute_layout('55V0001', '55V0002', 'Dual Band')

    lines = render(layout, '55V0001', '55V0002', 'Dual Band', 384, 240)

    assert lines == [
        '! 0 200 200 240 1',
        'PAGE-WIDTH 384',
        'TEXT 4 1 120 5 Dual Band',
        'BARCODE 128 1 1 60 136 25 55V0001',
        'TEXT 4 0 164 93 55V0001',
        'BARCODE 128 1 1 60 136 120 55V0002',
        'TEXT 4 0 164 188 55V0002',
        'PRINT',
    ]


def test_render_copies_layout_coordinates():
    config = LabelConfiguration(center_contents=False, barcode_position_x=12, text_position_x=20,
                                barcode_width_scale=2, barcode_height=50, text_position_y=85)
    layout = compute_layout('72V1', '72V2', 'Tri Band', config)

    lines = render(layout, '72V1', '72V2', 'Tri Band', 400, 300, quantity=3)

    assert lines[0] == '! 0 200 200 300 3'
    assert lines[1] == 'PAGE-WIDTH 400'
    assert lines[3] == 'BARCODE 128 2 2 50 12 25 72V1'
    assert lines[4] == f'TEXT 4 0 20 {layout.text1_y} 72V1'
    assert lines[5] == f'BARCODE 128 2 2 50 12 {layout.barcode2_y} 72V2'


def test_serialize_uses_crlf_with_trailing_terminator():
    assert serialize(['! 0 200 200 240 1', 'PRINT']) == '! 0 200 200 240 1\r\nPRINT\r\n'


def test_serialized_job_ends_with_print():
    layout = compute_layout('55V0001', '55V0002', 'Dual Band')

    job = serialize(render(layout, '55V0001', '55V0002', 'Dual Band', 384, 240))

    assert job.endswith('PRINT\r\n')
    assert job.count('\r\n') == 8
    assert '\n' not in job.replace('\r\n', '')


def test_test_label():
    lines = render_test_label(240)

    assert lines[0] == '! 0 200 200 240 1'
    assert lines[-1] == 'PRINT'
    assert 'BARCODE 128 1 1 50 50 180 TEST123' in lines


def test_preview_size_and_mode():
    layout = compute_layout('55V0001', '55V0002', 'Dual Band')

    img = render_preview(layout, '55V0001', '55V0002', 'Dual Band', scale=2)

    assert img.mode == '1'
    assert img.size == (768, 480)


def test_preview_scale_is_clamped():
    layout = compute_layout('55V0001', '55V0002', 'Dual Band')

    large = render_preview(layout, '55V0001', '55V0002', 'Dual Band', scale=10000)
    small = render_preview(layout, '55V0001', '55V0002', 'Dual Band', scale=0)

    assert large.size == (384 * MAX_SCALE, 240 * MAX_SCALE)
    assert small.size == (384, 240)


def test_preview_draws_bars_at_layout_position():
    layout = compute_layout('55V0001', '55V0002', 'Dual Band')

    img = render_preview(layout, '55V0001', '55V0002', 'Dual Band', scale=1)

    # Start symbol begins with a 2-module bar
    assert img.getpixel((layout.barcode1_x, layout.barcode1_y + 10)) == 0
    assert img.getpixel((layout.barcode1_x - 1, layout.barcode1_y + 10)) != 0
    assert img.getpixel((layout.barcode2_x, layout.barcode2_y + 10)) == 0


def test_preview_png_bytes(tmp_path):
    layout = compute_layout('55V0001', '55V0002', 'Dual Band')

    png = render_preview_png(layout, '55V0001', '55V0002', 'Dual Band')

    assert png.startswith(b'\x89PNG')
    path = tmp_path / 'label.png'
    path.write_bytes(png)
    with Image.open(path) as img:
        assert img.size == (768, 480)
