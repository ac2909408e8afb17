# utils/barcode.py

from io import BytesIO
from typing import Optional

from barcode import Code128
from barcode.writer import ImageWriter


def can_encode(barcode_text: str) -> bool:
    # Code128 covers printable ASCII only
    return bool(barcode_text) and barcode_text.isascii() and barcode_text.isprintable()


def barcode_png(barcode_text: str) -> Optional[bytes]:
    """
    Render a Code128 barcode for `barcode_text` as PNG bytes, so the
    search panel can show the label the operator should look for.
    Returns None for text Code128 can't carry.
    """
    if not can_encode(barcode_text):
        return None

    buf = BytesIO()
    Code128(barcode_text, writer=ImageWriter()).write(buf)
    return buf.getvalue()
