import logging
import socket
import threading
import time

import pytest

from packetlink import server
from packetlink.protocol import INT_STRUCT, OpCode, Packet, encode_message


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def test_receive_operation_message(pair):
    a, b = pair
    a.sendall(encode_message("hola"))
    assert server.receive_operation(b) is OpCode.MESSAGE


def test_receive_operation_unknown_code(pair):
    a, b = pair
    a.sendall(INT_STRUCT.pack(7))
    assert server.receive_operation(b) == 7


def test_receive_operation_disconnect_closes(pair):
    a, b = pair
    a.close()
    assert server.receive_operation(b) is None
    assert b.fileno() == -1


def test_receive_message(pair, caplog):
    a, b = pair
    a.sendall(encode_message("hola"))
    logger = logging.getLogger("test.server.message")
    with caplog.at_level(logging.INFO, logger="test.server.message"):
        assert server.receive_operation(b) is OpCode.MESSAGE
        assert server.receive_message(b, logger) == "hola"
    assert "hola" in caplog.text


def test_receive_packet(pair):
    a, b = pair
    packet = Packet()
    packet.add("uno")
    packet.add("dos")
    a.sendall(packet.serialize())
    assert server.receive_operation(b) is OpCode.PACKET
    assert server.receive_packet(b) == ["uno", "dos"]


def test_receive_buffer_truncated(pair):
    a, b = pair
    a.sendall(INT_STRUCT.pack(10) + b"abc")
    a.close()
    with pytest.raises(ConnectionError):
        server.receive_buffer(b)


def test_receive_buffer_negative_size(pair):
    a, b = pair
    a.sendall(INT_STRUCT.pack(-1))
    with pytest.raises(ValueError):
        server.receive_buffer(b)


def test_serve_client(pair, caplog):
    a, b = pair
    packet = Packet()
    packet.add("alfa")
    packet.add("beta")
    a.sendall(encode_message("hola") + INT_STRUCT.pack(9) + packet.serialize())
    a.close()
    logger = logging.getLogger("test.server.serve")
    with caplog.at_level(logging.DEBUG, logger="test.server.serve"):
        assert server.serve_client(b, logger) == 1
    messages = [r.getMessage() for r in caplog.records]
    assert "alfa" in messages
    assert "beta" in messages
    assert [r.levelno for r in caplog.records].count(logging.WARNING) == 1
    assert caplog.records[-1].levelno == logging.ERROR


def test_start_and_accept():
    with server.start_server("127.0.0.1", 0) as srv:
        port = srv.getsockname()[1]
        with socket.create_connection(("127.0.0.1", port)) as conn:
            peer = server.accept_client(srv)
            with peer:
                conn.sendall(encode_message("ping"))
                assert server.receive_operation(peer) is OpCode.MESSAGE
                assert server.receive_buffer(peer) == b"ping\x00"


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_main_serves_one_client(tmp_path):
    port = _free_port()
    log_path = tmp_path / "server.log"
    result = []
    thread = threading.Thread(
        target=lambda: result.append(server.main(["--port", str(port), "--log", str(log_path)]))
    )
    thread.start()

    conn = None
    deadline = time.monotonic() + 5
    while conn is None:
        try:
            conn = socket.create_connection(("127.0.0.1", port))
        except ConnectionRefusedError:
            if time.monotonic() > deadline:
                raise
            time.sleep(0.05)
    with conn:
        conn.sendall(encode_message("saludo"))
    thread.join(timeout=5)

    assert result == [1]
    assert "saludo" in log_path.read_text(encoding="utf-8")