"""Single-connection TCP servers: listening, accepting, out-of-band reading
and sending standard output to a client."""

from __future__ import annotations

import contextlib
import os
import re
import signal
import socket
import sys
import threading
import time

BUF_SIZE = 1024
ACCEPT_DELAY = 10

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@contextlib.contextmanager
def _sigterm_event():
    """Yield an event that SIGTERM sets while the block runs."""
    stop = threading.Event()
    if threading.current_thread() is not threading.main_thread():
        yield stop
        return
    previous = signal.signal(signal.SIGTERM, lambda signum, frame: stop.set())
    try:
        yield stop
    finally:
        signal.signal(signal.SIGTERM, previous)


def _wait_until(stop):
    while not stop.is_set():
        stop.wait(1)


def _listening_socket(ip, port, backlog=5):
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((ip, port))
        sock.listen(backlog)
    except OSError:
        sock.close()
        raise
    return sock


def _accept(sock):
    try:
        return sock.accept()
    except OSError as exc:
        print(f"errno is:{exc.errno}")
        return None, None


def listen_until_term(ip, port, backlog):
    """Listen with ``backlog`` until SIGTERM arrives; return the bound address."""
    with _sigterm_event() as stop, _listening_socket(ip, port, backlog) as sock:
        address = sock.getsockname()
        _wait_until(stop)
    return address


def accept_one(ip, port, delay):
    """Wait ``delay`` seconds, accept one client, then hold it until SIGTERM.

    Returns the client's address, or ``None`` when accepting failed.
    """
    with _sigterm_event() as stop, _listening_socket(ip, port) as sock:
        print(f"successfully create one socket {ip}:{port} ")
        time.sleep(delay)
        conn, client = _accept(sock)
        if conn is not None:
            print(f"connected with ip:{client[0]} and port:{client[1]}")
        try:
            _wait_until(stop)
        finally:
            if conn is not None:
                conn.close()
        print("close connection ")
    return client


def _recv(conn, flags=0):
    try:
        return conn.recv(BUF_SIZE - 1, flags)
    except OSError:
        return None


def _report(data, kind):
    size = -1 if data is None else len(data)
    text = (data or b"").decode("latin-1")
    print(f"got {size} bytes of {kind} data '{text}'")


def receive_oob(ip, port):
    """Accept one client and read normal, out-of-band and normal data.

    Holds the connection until SIGTERM and returns the three reads; a read
    that failed gives ``None``.
    """
    with _sigterm_event() as stop, _listening_socket(ip, port) as sock:
        conn, _ = _accept(sock)
        reads = []
        if conn is not None:
            try:
                for flags, kind in ((0, "normal"), (socket.MSG_OOB, "oob"), (0, "normal")):
                    data = _recv(conn, flags)
                    _report(data, kind)
                    reads.append(data)
                _wait_until(stop)
            finally:
                conn.close()
        else:
            _wait_until(stop)
        print("close connection ")
    return reads


def redirect_stdout(ip, port):
    """Accept one client and send it what is printed; return its address."""
    with _listening_socket(ip, port) as sock:
        conn, client = _accept(sock)
        if conn is None:
            return None
        with conn, conn.makefile("w") as stream, contextlib.redirect_stdout(stream):
            print("abcd")
    return client


def _atoi(text):
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


_USAGE = (
    "listen ip_address port_number backlog",
    "accept ip_address port_number",
    "recv ip_address port_number",
    "cgi ip_address port_number",
)


def main(argv=None):
    """Command entry point: ``listen ip port backlog`` or ``accept|recv|cgi ip port``."""
    args = sys.argv[1:] if argv is None else list(argv)
    program = os.path.basename(sys.argv[0])
    needed = {"listen": 4, "accept": 3, "recv": 3, "cgi": 3}
    command = args[0] if args else None
    if command not in needed or len(args) < needed[command]:
        for usage in _USAGE:
            print(f"usage:{program} {usage}")
        return 1
    ip, port = args[1], _atoi(args[2])
    if command == "listen":
        listen_until_term(ip, port, _atoi(args[3]))
    elif command == "accept":
        accept_one(ip, port, ACCEPT_DELAY)
    elif command == "recv":
        receive_oob(ip, port)
    else:
        redirect_stdout(ip, port)
    return 0


if __name__ == "__main__":
    sys.exit(main())