"""Scannable QR rendering for ticket codes."""

from io import BytesIO

import qrcode


def ticket_qr_png(code: str, box_size: int = 8, border: int = 2) -> bytes:
    """Render ``code`` as a PNG QR image."""
    qr = qrcode.QRCode(version=1, box_size=box_size, border=border)
    qr.add_data(code)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
