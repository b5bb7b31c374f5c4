"""Small TCP clients: out-of-band sender, receiver, daytime query and chat."""

from __future__ import annotations

import os
import re
import selectors
import socket
import sys

BUF_SIZE = 1024
CHAT_BUFFER_SIZE = 64
STDIN_CHUNK = 32768
NORMAL_DATA = b"123"
OOB_DATA = b"abc"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _connect(ip, port):
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.connect((ip, port))
    except OSError:
        sock.close()
        print("connection failed")
        raise
    return sock


def send_oob(ip, port):
    """Send normal data followed by out-of-band data; return the byte counts."""
    with _connect(ip, port) as sock:
        sock.sendall(NORMAL_DATA)
        oob_sent = sock.send(OOB_DATA, socket.MSG_OOB)
    return len(NORMAL_DATA), oob_sent


def _recv(sock):
    try:
        return sock.recv(BUF_SIZE - 1)
    except OSError:
        return None


def receive_messages(ip, port):
    """Read three messages from the server; a failed read gives ``None``."""
    with _connect(ip, port) as sock:
        first = _recv(sock)
        text = (first or b"").decode("latin-1")
        print(f"got {-1 if first is None else len(first)} bytes of normal data '\n{text}\n'")

        try:
            second = sock.recv(BUF_SIZE - 1)
        except OSError as exc:
            print(f"Error: {exc.strerror}")
            second = None
        else:
            print(f"got {len(second)} bytes of oob data '{second.decode('latin-1')}'")

        third = _recv(sock)
        text = (third or b"").decode("latin-1")
        print(f"got {-1 if third is None else len(third)} bytes of normal data '{text}'")
    return [first, second, third]


def get_daytime(host):
    """Ask the daytime service on ``host`` for the time and return its answer."""
    address = socket.gethostbyname(host)
    port = socket.getservbyname("daytime", "tcp")
    print(f"daytime port is {port}")
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.connect((address, port))
        except OSError as exc:
            print(f"Error: {exc.strerror}")
            raise
        data = sock.recv(127)
    if not data:
        raise ConnectionError("the daytime server sent nothing")
    text = data.decode("latin-1")
    print(f"the day time is:{text}", end="")
    return text


def chat_client(ip, port):
    """Relay standard input to the server and print what it sends.

    Returns the chunks received once the server closes the connection.
    """
    sock = _connect(ip, port)
    received = []
    stdin_fd = sys.stdin.fileno()
    with sock, selectors.DefaultSelector() as selector:
        selector.register(sock, selectors.EVENT_READ)
        selector.register(stdin_fd, selectors.EVENT_READ)
        while True:
            ready = {key.fileobj for key, _ in selector.select()}
            if sock in ready:
                try:
                    data = sock.recv(CHAT_BUFFER_SIZE - 1)
                except ConnectionResetError:
                    data = b""
                if not data:
                    print("server close the connection")
                    return received
                print(data.decode("latin-1"))
                received.append(data)
            if stdin_fd in ready:
                chunk = os.read(stdin_fd, STDIN_CHUNK)
                if chunk:
                    sock.sendall(chunk)
                else:
                    selector.unregister(stdin_fd)


def _atoi(text):
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


_USAGE = {
    "send": "send ip_address port_number",
    "recv": "recv ip_address port_number",
    "daytime": "daytime host",
    "chat": "chat ip_address port_number",
}


def main(argv=None):
    """Command entry point: ``send|recv|chat ip port`` or ``daytime host``."""
    args = sys.argv[1:] if argv is None else list(argv)
    program = os.path.basename(sys.argv[0])
    command = args[0] if args else None
    needed = {"send": 3, "recv": 3, "chat": 3, "daytime": 2}
    if command not in needed or len(args) < needed[command]:
        for usage in _USAGE.values():
            print(f"usage:{program} {usage}")
        return 1
    if command == "daytime":
        try:
            get_daytime(args[1])
        except OSError:
            return 1
        return 0
    ip, port = args[1], _atoi(args[2])
    try:
        if command == "send":
            send_oob(ip, port)
        elif command == "recv":
            receive_messages(ip, port)
        else:
            chat_client(ip, port)
    except OSError:
        return 1 if command == "chat" else 0
    return 0


if __name__ == "__main__":
    sys.exit(main())