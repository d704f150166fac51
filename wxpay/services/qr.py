"""
支付二维码生成
"""
from io import BytesIO

import qrcode
import qrcode.constants
from qrcode.main import QRCode


def render_qr_png(content: str, box_size: int = 10, border: int = 2) -> bytes:
    """将 code_url 渲染为 PNG 图片字节"""
    qr = QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(content)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
