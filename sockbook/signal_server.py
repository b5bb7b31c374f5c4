"""TCP server whose signals reach the main loop through a socket pair."""

from __future__ import annotations

import os
import re
import selectors
import signal
import socket
import sys
import threading

HANDLED_SIGNALS = (signal.SIGHUP, signal.SIGCHLD, signal.SIGTERM, signal.SIGINT)
_STOP_SIGNALS = (signal.SIGTERM, signal.SIGINT)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class SignalServer:
    """Accepts clients and stops once SIGTERM or SIGINT arrives."""

    def __init__(self, host, port):
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._listener.bind((host, port))
            self._listener.listen(5)
        except OSError:
            self._listener.close()
            raise
        self._listener.setblocking(False)
        self.address = self._listener.getsockname()
        self._pipe_r, self._pipe_w = socket.socketpair()
        self._pipe_r.setblocking(False)
        self._pipe_w.setblocking(False)
        self._selector = selectors.DefaultSelector()
        self._clients: list[socket.socket] = []

    def serve_forever(self):
        """Run until a stop signal arrives; return the signal numbers handled."""
        handled = []
        previous = {}
        if threading.current_thread() is threading.main_thread():
            for signum in HANDLED_SIGNALS:
                previous[signum] = signal.signal(signum, self._on_signal)
        self._selector.register(self._listener, selectors.EVENT_READ)
        self._selector.register(self._pipe_r, selectors.EVENT_READ)
        stop_server = False
        try:
            while not stop_server:
                for key, _ in self._selector.select():
                    sock = key.fileobj
                    if sock is self._listener:
                        self._accept()
                    elif sock is self._pipe_r:
                        try:
                            data = self._pipe_r.recv(1024)
                        except BlockingIOError:
                            continue
                        for signum in data:
                            handled.append(signum)
                            if signum in _STOP_SIGNALS:
                                stop_server = True
        finally:
            for signum, handler in previous.items():
                if handler is not None:
                    signal.signal(signum, handler)
            print("close fds")
            self._close_all()
        return handled

    def stop(self):
        """Deliver SIGTERM to the loop through the socket pair."""
        self._on_signal(signal.SIGTERM, None)

    def _on_signal(self, signum, frame):
        try:
            self._pipe_w.send(bytes([signum]))
        except OSError:
            pass

    def _accept(self):
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        self._clients.append(conn)

    def _close_all(self):
        for conn in self._clients:
            conn.close()
        self._clients.clear()
        self._selector.close()
        self._listener.close()
        self._pipe_w.close()
        self._pipe_r.close()


def _atoi(text):
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def main(argv=None):
    """Command entry point: ``ip_address port_number``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print(f"usage:{os.path.basename(sys.argv[0])} ip_address port_number")
        return 1
    try:
        server = SignalServer(args[0], _atoi(args[1]))
    except OSError as exc:
        print(f"errno is{exc.errno}")
        return 1
    server.serve_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())