import pytest

from utils.barcode import barcode_png, can_encode


def test_renders_png():
    png = barcode_png("A-1001")
    assert png is not None
    assert png.startswith(b"\x89PNG")


@pytest.mark.parametrize("text", ["", "料件01", "A\t1"])
def test_unencodable_text(text):
    assert not can_encode(text)
    assert barcode_png(text) is None
