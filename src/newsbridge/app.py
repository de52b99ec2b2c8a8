"""Main event loop wiring the transport, status page, commands and poller."""

import asyncio
import signal as signal_mod
import threading
from datetime import datetime, timezone
from typing import Optional

import structlog
import uvicorn

from newsbridge.commands.router import CommandRouter
from newsbridge.config import AppConfig
from newsbridge.crash_guard import CrashGuard
from newsbridge.models import IncomingMessage
from newsbridge.news.client import NewsClient
from newsbridge.notify.broadcaster import Broadcaster
from newsbridge.notify.poller import NewsPoller
from newsbridge.providers import create_transport
from newsbridge.subscriptions.registry import SubscriptionRegistry
from newsbridge.transport.base import MessagingTransport
from newsbridge.transport.media import MediaFetcher
from newsbridge.web.status import BridgeStatus, create_status_app

logger = structlog.get_logger(__name__)


class NewsBridge:
    """Owns every component for the process lifetime and runs the poll loop."""

    def __init__(self, config: AppConfig, transport: Optional[MessagingTransport] = None):
        self._config = config
        self._news = NewsClient(config.news_api)
        self._media = MediaFetcher(config.news_api.timeout_seconds)
        self._registry = SubscriptionRegistry()
        self._transport = transport or create_transport(config)
        self._broadcaster = Broadcaster(self._registry, self._transport)
        self._poller = NewsPoller(
            self._news,
            self._registry,
            self._broadcaster,
            self._media,
            config.poller,
        )
        self._router = CommandRouter(self._news, self._registry, self._media, config.news_api)
        self._status = BridgeStatus()
        self._crash_guard = CrashGuard(config.crash_guard.suppressed_patterns)
        self._server: Optional[uvicorn.Server] = None
        self._running = False
        self._tick_count = 0

        self._transport.on_qr_code(self._handle_qr, name="status.qr")
        self._transport.on_ready(self._handle_ready, name="status.ready")
        self._transport.on_message(self._handle_message, name="commands.route")

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def poller(self) -> NewsPoller:
        return self._poller

    @property
    def status(self) -> BridgeStatus:
        return self._status

    async def start(self) -> None:
        """Start the bridge. Runs until a shutdown signal is received."""
        logger.info(
            "bridge.starting",
            news_api=self._config.news_api.base_url,
            port=self._config.server.port,
            poll_interval_minutes=self._config.poller.interval_minutes,
            transport=self._config.transport.provider,
        )

        self._running = True
        self._crash_guard.install(asyncio.get_running_loop())
        self._register_signal_handlers()

        await asyncio.to_thread(self._poller.initialize)
        self._start_status_server()
        self._start_transport()

        try:
            await self._poll_loop()
        except asyncio.CancelledError:
            logger.info("bridge.cancelled")
        finally:
            self._shutdown()

    async def _poll_loop(self) -> None:
        interval_seconds = max(1, int(self._config.poller.interval_minutes * 60))
        while self._running:
            # Sleep until next tick, but check for shutdown every second
            for _ in range(interval_seconds):
                if not self._running:
                    return
                await asyncio.sleep(1)
            await self._tick()

    async def _tick(self) -> None:
        """Run one poll in a worker thread; the next tick waits for it."""
        self._tick_count += 1
        tick_start = datetime.now(timezone.utc)

        try:
            result = await asyncio.to_thread(self._poller.poll)
            logger.info(
                "bridge.tick",
                tick=self._tick_count,
                result=result.value,
                subscribers=len(self._registry),
            )
        except Exception as e:
            logger.error(
                "bridge.tick_error",
                error=str(e),
                tick=self._tick_count,
                exc_info=True,
            )

        tick_duration = (datetime.now(timezone.utc) - tick_start).total_seconds()
        if tick_duration > self._config.news_api.timeout_seconds:
            logger.info("bridge.slow_tick", duration_s=round(tick_duration, 2))

    def _handle_qr(self, payload: str) -> None:
        self._status.set_qr_code(payload)

    def _handle_ready(self) -> None:
        self._status.mark_connected()
        logger.info("bridge.ready")

    def _handle_message(self, message: IncomingMessage) -> None:
        reply = self._router.handle(message.chat_id, message.body)
        if reply is None:
            return

        try:
            if reply.media is not None:
                self._transport.send_message(message.chat_id, reply.media, caption=reply.text)
            else:
                self._transport.send_message(message.chat_id, reply.text)
        except Exception as e:
            logger.error("bridge.reply_failed", chat_id=message.chat_id, error=str(e))

    def _start_status_server(self) -> None:
        # Off the main thread uvicorn leaves signal handling to us
        server_config = uvicorn.Config(
            create_status_app(self._status),
            host=self._config.server.host,
            port=self._config.server.port,
            log_config=None,
        )
        self._server = uvicorn.Server(server_config)
        threading.Thread(target=self._server.run, name="status-server", daemon=True).start()
        logger.info(
            "bridge.status_server_started",
            host=self._config.server.host,
            port=self._config.server.port,
        )

    def _start_transport(self) -> None:
        threading.Thread(target=self._run_transport, name="transport", daemon=True).start()

    def _run_transport(self) -> None:
        try:
            self._transport.connect()
        except Exception as e:
            logger.error("bridge.transport_failed", error=str(e), exc_info=True)
        else:
            logger.warning("bridge.transport_disconnected")

    def _register_signal_handlers(self) -> None:
        """Register SIGINT/SIGTERM handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()
        for sig in (signal_mod.SIGINT, signal_mod.SIGTERM):
            loop.add_signal_handler(sig, self._request_shutdown)

    def _request_shutdown(self) -> None:
        logger.info("bridge.shutdown_requested")
        self._running = False

    def _shutdown(self) -> None:
        logger.info("bridge.shutting_down")
        if self._server is not None:
            self._server.should_exit = True
        try:
            self._transport.disconnect()
        except Exception as e:
            logger.warning("bridge.transport_disconnect_failed", error=str(e))
        self._news.close()
        self._media.close()
        self._crash_guard.uninstall()
        logger.info(
            "bridge.stopped",
            ticks=self._tick_count,
            subscribers=len(self._registry),
            last_seen_article_id=self._poller.last_seen_article_id,
        )
