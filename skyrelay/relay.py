"""Per-device receive loop and the listening sockets devices connect to."""

from __future__ import annotations

import logging
import select
import socket
import threading
from typing import Optional

from .events import EventQueue
from .frame import BUFFER_SIZE, FROM_BYTE_POS, FROM_DEVICE_BYTE, FROM_MAIN_BYTE

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


class DeviceLink:
    """Connection state shared between the server and one device's relay loop."""

    def __init__(self, name: str, running: threading.Event) -> None:
        self.name = name
        self.running = running
        self.events = EventQueue()
        self.sock: Optional[socket.socket] = None
        self._connected = threading.Event()

    def attach(self, sock: socket.socket) -> None:
        """Hand a freshly accepted device socket to the link."""
        self.sock = sock
        self._connected.set()

    def detach(self) -> None:
        """Mark the device as gone and close its socket."""
        sock, self.sock = self.sock, None
        self._connected.clear()
        if sock is not None:
            try:
                sock.close()
            except OSError:
                pass

    def is_connected(self) -> bool:
        return self._connected.is_set()

    def _wait_connected(self) -> bool:
        while self.running.is_set():
            if self._connected.wait(POLL_INTERVAL):
                return True
        return False


def _receive_buffer(link: DeviceLink) -> Optional[bytes]:
    """Collect one full buffer from the device, or None on disconnect or stop."""
    received = bytearray()
    sock = link.sock
    while len(received) < BUFFER_SIZE:
        if not link.running.is_set() or sock is None:
            return None
        try:
            ready, _, _ = select.select([sock], [], [], POLL_INTERVAL)
            if not ready:
                continue
            data = sock.recv(BUFFER_SIZE - len(received))
        except (OSError, ValueError) as exc:
            logger.critical("[%s_thread] : unknown error: %s", link.name, exc)
            link.detach()
            return None
        if not data:
            logger.error("[%s_thread] : client not connected", link.name)
            link.detach()
            return None
        received += data
    return bytes(received)


def _dispatch(link: DeviceLink, buffer: bytes) -> None:
    origin = buffer[FROM_BYTE_POS]
    if origin == FROM_DEVICE_BYTE:
        if not link.events.push_back(buffer):
            logger.warning("[%s_thread] : event queue full, buffer dropped", link.name)
    elif origin == FROM_MAIN_BYTE:
        sock = link.sock
        if sock is None:
            logger.critical("[%s_thread] : send error: device not connected", link.name)
            return
        try:
            sock.sendall(buffer)
        except OSError as exc:
            logger.critical("[%s_thread] : send error: %s", link.name, exc)
        else:
            logger.debug(
                "[%s_thread] : %d bytes sent to %s_client", link.name, len(buffer), link.name
            )
    else:
        logger.error("[%s_thread] : unknown from_byte value : %x", link.name, origin)


def relay_loop(link: DeviceLink) -> None:
    """Receive fixed-size buffers from the device until the server stops."""
    try:
        while link.running.is_set():
            if not link._wait_connected():
                break
            buffer = _receive_buffer(link)
            if buffer is not None:
                _dispatch(link, buffer)
    finally:
        link.detach()
        logger.info("[%s_thread] : finished successfully", link.name)


def create_listener(port: int, host: str = "") -> socket.socket:
    """Open a TCP socket listening on the given port; raise OSError on failure."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        reuse_port = getattr(socket, "SO_REUSEPORT", None)
        if reuse_port is not None:
            try:
                sock.setsockopt(socket.SOL_SOCKET, reuse_port, 1)
            except OSError as exc:
                logger.critical("setsockopt() failed : %s", exc)
        sock.bind((host, port))
        sock.listen(1)
    except OSError:
        sock.close()
        raise
    logger.debug("Listening on port %d...", sock.getsockname()[1])
    return sock