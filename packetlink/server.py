"""Server that accepts one client and logs the frames it receives."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from pathlib import Path

from .logs import TRACE, create_logger
from .protocol import INT_STRUCT, OpCode, decode_values

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4444
DEFAULT_LOG = "log.log"
LOGGER_NAME = "server"

_log = logging.getLogger(LOGGER_NAME)


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    """Read up to ``size`` bytes, stopping early only when the peer closes."""
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            break
        data.extend(chunk)
    return bytes(data)


def start_server(host: str = DEFAULT_HOST, port: int | str = DEFAULT_PORT) -> socket.socket:
    """Create a listening IPv4 TCP socket bound to ``host``:``port``."""
    infos = socket.getaddrinfo(
        host, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )
    family, socktype, proto, _, address = infos[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.bind(address)
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    _log.log(TRACE, "Ready to listen to my client")
    return sock


def accept_client(server_sock: socket.socket) -> socket.socket:
    """Wait for and return the next client connection."""
    client_sock, _ = server_sock.accept()
    _log.info("A client connected!")
    return client_sock


def receive_operation(sock: socket.socket) -> OpCode | int | None:
    """Read the op code of the next frame.

    Returns None, closing the socket, when the client has disconnected.
    Unknown codes are returned as plain ints.
    """
    data = _recv_exact(sock, INT_STRUCT.size)
    if len(data) < INT_STRUCT.size:
        sock.close()
        return None
    (value,) = INT_STRUCT.unpack(data)
    try:
        return OpCode(value)
    except ValueError:
        return value


def receive_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload; raises ConnectionError if cut short."""
    header = _recv_exact(sock, INT_STRUCT.size)
    if len(header) < INT_STRUCT.size:
        raise ConnectionError("connection closed while reading payload size")
    (size,) = INT_STRUCT.unpack(header)
    if size < 0:
        raise ValueError(f"negative payload size {size}")
    payload = _recv_exact(sock, size)
    if len(payload) < size:
        raise ConnectionError("connection closed while reading payload")
    return payload


def receive_message(sock: socket.socket, logger: logging.Logger) -> str:
    """Read a MESSAGE payload, log it and return it as a string."""
    payload = receive_buffer(sock)
    message = payload.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    logger.info("Received the message %s", message)
    return message


def receive_packet(sock: socket.socket) -> list[str]:
    """Read a PACKET payload and return its values."""
    return decode_values(receive_buffer(sock))


def serve_client(sock: socket.socket, logger: logging.Logger) -> int:
    """Handle frames until the client disconnects; return the exit status."""
    while True:
        op = receive_operation(sock)
        if op is None:
            logger.error("The client disconnected. Shutting down server")
            return 1
        if op == OpCode.MESSAGE:
            receive_message(sock, logger)
        elif op == OpCode.PACKET:
            values = receive_packet(sock)
            logger.info("Received the following values:")
            for value in values:
                logger.info("%s", value)
        else:
            logger.warning("Unknown operation %s", op)


def main(argv: list[str] | None = None) -> int:
    """Start the server, serve one client and return the exit status."""
    parser = argparse.ArgumentParser(prog="packetlink-server")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", default=DEFAULT_PORT, type=int)
    parser.add_argument("--log", default=DEFAULT_LOG, type=Path)
    args = parser.parse_args(argv)

    logger = create_logger(args.log, LOGGER_NAME, True, "DEBUG")
    try:
        with start_server(args.host, args.port) as server_sock:
            logger.info("Server ready to receive the client")
            client_sock = accept_client(server_sock)
            with client_sock:
                return serve_client(client_sock, logger)
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


if __name__ == "__main__":
    sys.exit(main())