# app/core/qr.py
import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

QR_SIZE_PX = 200
QR_BORDER_MODULES = 2


def generate_qr_data_url(data: str, size: int = QR_SIZE_PX) -> str:
    """
    Render `data` as a black-on-white QR code PNG and return it as a
    data URL suitable for an <img src>.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=10,
        border=QR_BORDER_MODULES,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="#000000", back_color="#FFFFFF")
    img = img.resize((size, size))

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
