"""Asynchronous TCP/TLS transport that frames FIX messages."""

from __future__ import annotations

import asyncio
import logging
import ssl
from types import TracebackType
from typing import Any

from .builder import SOH, FixMessage
from .config import DeribitFixConfig
from .errors import FixConnectionError, FixIOError, FixTimeoutError, MessageParsingError

logger = logging.getLogger(__name__)

_READ_CHUNK = 4096
_READ_TIMEOUT_SECS = 1.0
_CHECKSUM_MARKER = b"10="
_SOH_BYTE = SOH.encode("ascii")

_Streams = tuple[asyncio.StreamReader, asyncio.StreamWriter]


async def _connect(config: DeribitFixConfig) -> _Streams:
    addr = config.connection_url()
    kwargs: dict[str, Any] = {}
    if config.use_ssl:
        try:
            context = ssl.create_default_context()
        except (ssl.SSLError, OSError) as exc:
            raise FixConnectionError(f"TLS setup failed: {exc}") from exc
        kwargs = {"ssl": context, "server_hostname": config.host}
    logger.info("Connecting to %s via %s", addr, "TLS" if config.use_ssl else "TCP")

    try:
        streams = await asyncio.wait_for(
            asyncio.open_connection(config.host, config.port, **kwargs),
            timeout=config.connection_timeout,
        )
    except asyncio.TimeoutError as exc:
        raise FixTimeoutError(f"Connection timeout to {addr}") from exc
    except ssl.SSLError as exc:
        raise FixConnectionError(f"TLS handshake failed: {exc}") from exc
    except OSError as exc:
        raise FixConnectionError(f"Failed to connect to {addr}: {exc}") from exc

    logger.info("Successfully connected via %s", "TLS" if config.use_ssl else "TCP")
    return streams


class Connection:
    """A live connection to a FIX server that sends and receives framed messages."""

    def __init__(
        self,
        config: DeribitFixConfig,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        self._config = config
        self._reader = reader
        self._writer = writer
        self._buffer = bytearray()
        self._connected = True

    @classmethod
    async def open(cls, config: DeribitFixConfig) -> Connection:
        """Connect to the server named by ``config``, over TLS if it asks for SSL."""
        reader, writer = await _connect(config)
        return cls(config, reader, writer)

    async def __aenter__(self) -> Connection:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def config(self) -> DeribitFixConfig:
        return self._config

    def is_connected(self) -> bool:
        return self._connected

    async def send_message(self, message: FixMessage) -> None:
        """Write one message to the stream and flush it."""
        if not self._connected:
            raise FixConnectionError("Connection is not active")
        text = str(message)
        logger.debug("Sending FIX message: %s", text)
        try:
            self._writer.write(text.encode("utf-8"))
            await self._writer.drain()
        except OSError as exc:
            raise FixIOError(exc) from exc

    async def receive_message(self) -> FixMessage | None:
        """Return the next complete message, or None if none arrives within a second.

        Returns None as well when the server closes the connection, which then
        counts as disconnected.
        """
        if not self._connected:
            raise FixConnectionError("Not connected to server")

        if self._buffer:
            message = self._try_parse_message()
            if message is not None:
                return message

        try:
            data = await asyncio.wait_for(self._reader.read(_READ_CHUNK), _READ_TIMEOUT_SECS)
        except asyncio.TimeoutError:
            return None
        except BlockingIOError:
            return None
        except OSError as exc:
            logger.error("IO error reading from server: %s", exc)
            raise FixIOError(exc) from exc

        if not data:
            logger.debug("Connection closed by server")
            self._connected = False
            return None

        logger.debug("Received %d bytes from server", len(data))
        self._buffer.extend(data)
        return self._try_parse_message()

    def _frame_end(self) -> int | None:
        checksum_pos = self._buffer.find(_CHECKSUM_MARKER)
        if checksum_pos < 0:
            return None
        soh_pos = self._buffer.find(_SOH_BYTE, checksum_pos)
        if soh_pos < 0:
            return None
        return soh_pos + 1

    def _try_parse_message(self) -> FixMessage | None:
        end = self._frame_end()
        if end is None:
            return None
        raw = bytes(self._buffer[:end])
        del self._buffer[:end]
        text = raw.decode("utf-8", errors="replace")
        logger.debug("Received FIX message: %s", text)
        try:
            return FixMessage.parse(text)
        except MessageParsingError as exc:
            raise MessageParsingError(f"Failed to parse FIX message: {exc.message}") from exc

    async def close(self) -> None:
        """Shut the stream down and mark the connection inactive."""
        self._connected = False
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except ConnectionError:
            pass
        except OSError as exc:
            raise FixIOError(exc) from exc
        logger.info("Connection closed")

    async def reconnect(self) -> None:
        """Drop the current stream and connect again with the same configuration."""
        logger.info("Reconnecting to Deribit FIX server")
        try:
            await self.close()
        except FixIOError:
            pass
        self._reader, self._writer = await _connect(self._config)
        self._buffer.clear()
        self._connected = True
        logger.info("Successfully reconnected")