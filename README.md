# packetlink

A small TCP client and server pair that talk over a simple binary protocol.
The client reads settings from a configuration file, logs what it reads from
the console, sends one message to the server and then sends a packet of
values typed at the prompt. The server listens, accepts one client and logs
every message and packet it receives until that client disconnects.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running

Start the server first. By default it listens on `127.0.0.1`, port `4444`,
and logs to `log.log` at DEBUG level, echoing to the console:

```
packetlink-server
packetlink-server --host 127.0.0.1 --port 4444 --log log.log
```

Then start the client in a directory that holds its configuration file:

```
packetlink-client
packetlink-client --config cliente.config --log tp0.log
```

The client reads `cliente.config` and logs to `tp0.log` unless told otherwise.
The configuration file is a plain `KEY=value` file: blank lines and lines
starting with `#` are ignored, and each other line is split on its first `=`.
The client needs these three keys:

```
CLAVE=hello
IP=127.0.0.1
PUERTO=4444
```

`CLAVE` is the message sent to the server; `IP` and `PUERTO` say where the
server is. The client logs each of the three values it finds.

Once running, the client prompts with `> ` twice over:

1. Lines typed at the first prompt are only logged; an empty line (or end of
   input) ends it.
2. The client then connects and sends `CLAVE` as a message. Lines typed at the
   second prompt are collected into a packet; an empty line (or end of input)
   sends the packet and closes the connection.

Client exit status: `0` on success, `1` if the log file cannot be opened or
the server cannot be reached, `2` if the configuration file cannot be read or
lacks one of the three keys.

The server handles a single client. When that client disconnects it logs an
error and exits with status `1`. Unknown operation codes are logged as
warnings and skipped.

## Wire format

All integers are 32-bit little-endian. Every frame starts with two of them:
the operation code and the size of the payload that follows.

| Operation | Code | Payload |
|-----------|------|---------|
| message   | 0    | the text, followed by a zero byte |
| packet    | 1    | a sequence of entries, each a 32-bit length followed by that many bytes |

Text values in a packet also carry a trailing zero byte; on reading, each value
ends at its first zero byte.

## Using the library

```python
from packetlink.protocol import OpCode, Packet, encode_message, decode_values

frame = encode_message("hello")

packet = Packet()
packet.add("first")
packet.add(b"raw bytes")
data = packet.serialize()

values = decode_values(bytes(packet.payload))  # ["first", "raw bytes"]
```

`decode_values` raises `ValueError` when an entry is truncated or has a
negative length.

Other modules:

- `packetlink.client`: `create_connection`, `send_message`, `send_packet`,
  `read_console`, `collect_packet`, `init_logger`, `init_config`, `finish`.
- `packetlink.server`: `start_server`, `accept_client`, `receive_operation`,
  `receive_buffer`, `receive_message`, `receive_packet`, `serve_client`.
- `packetlink.config`: `load_config`, which raises `ConfigError` when the file
  cannot be read.
- `packetlink.logs`: `create_logger`, which returns a `logging.Logger` writing
  to a file and optionally to standard output, with levels TRACE, DEBUG, INFO,
  WARNING and ERROR.

## What it does not do

The server serves one client and then stops; it does not accept several
clients or keep running after a disconnect. Neither side encrypts or
authenticates the connection.