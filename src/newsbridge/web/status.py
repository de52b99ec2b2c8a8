"""
Status page served over HTTP.

GET / - connection state, or the login QR code while waiting to be scanned
"""

import base64
import io
import threading
from typing import Optional

import qrcode
import qrcode.image.svg
import structlog
from fastapi import FastAPI
from fastapi.responses import HTMLResponse

logger = structlog.get_logger(__name__)

CONNECTED_HTML = "<h1>✅ Bot is connected and active!</h1>"
QR_HTML_TEMPLATE = '<h1>Scan this QR Code:</h1><img src="{qr_url}">'
WAITING_HTML = "<h1>⏳ Generating QR Code... Please refresh in 10 seconds.</h1>"


def qr_to_data_url(payload: str) -> str:
    """Render a QR payload as an inline SVG data URL."""
    image = qrcode.make(payload, image_factory=qrcode.image.svg.SvgPathImage)
    buffer = io.BytesIO()
    image.save(buffer)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


class BridgeStatus:
    """Connection state shared between transport callbacks and the web page."""

    def __init__(self):
        self._lock = threading.Lock()
        self._connected = False
        self._qr_url: Optional[str] = None

    def set_qr_code(self, payload: str) -> None:
        qr_url = qr_to_data_url(payload)
        with self._lock:
            self._qr_url = qr_url
        logger.info("status.qr_received")

    def mark_connected(self) -> None:
        with self._lock:
            self._connected = True
        logger.info("status.connected")

    @property
    def connected(self) -> bool:
        with self._lock:
            return self._connected

    @property
    def qr_url(self) -> Optional[str]:
        with self._lock:
            return self._qr_url

    def render(self) -> str:
        with self._lock:
            connected, qr_url = self._connected, self._qr_url
        if connected:
            return CONNECTED_HTML
        if qr_url:
            return QR_HTML_TEMPLATE.format(qr_url=qr_url)
        return WAITING_HTML


def create_status_app(status: BridgeStatus) -> FastAPI:
    app = FastAPI(title="newsbridge", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return status.render()

    return app
