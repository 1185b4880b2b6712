"""Console client that sends a message and a packet of lines to the server."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

from .config import ConfigError, load_config
from .logs import create_logger
from .protocol import Packet, encode_message

PROMPT = "> "
DEFAULT_LOG = "tp0.log"
DEFAULT_CONFIG = "cliente.config"
LOGGER_NAME = "client"

PromptInput = Callable[[str], str]


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Open a TCP connection over IPv4 to ``ip``:``port``."""
    infos = socket.getaddrinfo(ip, port, socket.AF_INET, socket.SOCK_STREAM)
    family, socktype, proto, _, address = infos[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def send_message(message: str | bytes, sock: socket.socket) -> None:
    """Send ``message`` as a MESSAGE frame."""
    sock.sendall(encode_message(message))


def send_packet(packet: Packet, sock: socket.socket) -> None:
    """Send ``packet`` as one frame."""
    sock.sendall(packet.serialize())


def init_logger(path: str | Path = DEFAULT_LOG) -> logging.Logger:
    """Create the client logger, echoing to stdout at INFO level."""
    return create_logger(path, LOGGER_NAME, True, "INFO")


def init_config(path: str | Path = DEFAULT_CONFIG) -> dict[str, str]:
    """Load the client configuration; raises ConfigError if unreadable."""
    return load_config(path)


def _lines(prompt_input: PromptInput) -> Iterator[str]:
    while True:
        try:
            line = prompt_input(PROMPT)
        except EOFError:
            return
        if line == "":
            return
        yield line


def read_console(logger: logging.Logger, prompt_input: PromptInput = input) -> list[str]:
    """Read lines until an empty one, logging each; return the lines read."""
    lines = []
    for line in _lines(prompt_input):
        logger.info("Message read: %s", line)
        lines.append(line)
    return lines


def collect_packet(connection: socket.socket, prompt_input: PromptInput = input) -> Packet:
    """Read lines until an empty one into a packet, send it and return it."""
    packet = Packet()
    for line in _lines(prompt_input):
        packet.add(line)
    send_packet(packet, connection)
    return packet


def _close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def finish(connection: socket.socket, logger: logging.Logger) -> None:
    """Close the connection and release the logger's handlers."""
    connection.close()
    _close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    """Run the client: log, read config and console, then talk to the server."""
    parser = argparse.ArgumentParser(prog="packetlink-client")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="configuration file")
    parser.add_argument("--log", default=DEFAULT_LOG, help="log file")
    args = parser.parse_args(argv)

    try:
        logger = init_logger(args.log)
    except OSError:
        print("Could not create the logger", file=sys.stderr)
        return 1
    logger.info("Hello! I am a log")

    try:
        config = init_config(args.config)
    except ConfigError:
        print("Could not read the configuration file", file=sys.stderr)
        _close_logger(logger)
        return 2

    value = config.get("CLAVE")
    ip = config.get("IP")
    port = config.get("PUERTO")
    for item in (value, ip, port):
        if item is not None:
            logger.info(item)
    if value is None or ip is None or port is None:
        logger.error("Configuration must define CLAVE, IP and PUERTO")
        _close_logger(logger)
        return 2

    read_console(logger, input)

    try:
        connection = create_connection(ip, port)
    except OSError as exc:
        logger.error("Could not connect to %s:%s: %s", ip, port, exc)
        _close_logger(logger)
        return 1

    try:
        send_message(value, connection)
        collect_packet(connection, input)
    finally:
        finish(connection, logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())