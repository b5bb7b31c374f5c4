"""Serving clients with I/O multiplexing: select with out-of-band data,
level- and edge-triggered epoll, and one-shot epoll with worker threads."""

from __future__ import annotations

import os
import queue
import re
import select
import socket
import sys
import threading
import time

SELECT_BUFFER_SIZE = 1024
EPOLL_BUFFER_SIZE = 10
ONESHOT_BUFFER_SIZE = 1024
PROCESSING_DELAY = 5
_POLL_INTERVAL = 0.05

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


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


def serve_select(ip, port):
    """Accept one client and read normal and out-of-band data until it closes.

    Returns the reads as ``(kind, data)`` pairs, kind being ``"normal"`` or ``"oob"``.
    """
    received = []
    with _listening_socket(ip, port) as listener:
        try:
            conn, _ = listener.accept()
        except OSError as exc:
            print(f"errno is:{exc.errno}")
            return received
        with conn:
            while True:
                try:
                    readable, _, exceptional = select.select([conn], [], [conn])
                except OSError:
                    print("selection failure")
                    break
                if readable:
                    flags, kind = 0, "normal"
                elif exceptional:
                    flags, kind = socket.MSG_OOB, "oob"
                else:
                    continue
                try:
                    data = conn.recv(SELECT_BUFFER_SIZE - 1, flags)
                except OSError:
                    break
                if not data:
                    break
                print(f"get{len(data)} bytes of {kind} data:{data.decode('latin-1')}")
                received.append((kind, data))
    return received


def _accept_into(listener, ep, conns, events):
    try:
        conn, _ = listener.accept()
    except OSError:
        return
    conn.setblocking(False)
    conns[conn.fileno()] = conn
    ep.register(conn.fileno(), events)


def _drop(ep, conns, fd):
    conn = conns.pop(fd, None)
    try:
        ep.unregister(fd)
    except (OSError, ValueError):
        pass
    if conn is not None:
        conn.close()


def serve_epoll(ip, port, edge_triggered):
    """Serve clients with epoll, yielding ``(fd, data)`` for every chunk read.

    Connections are level-triggered unless ``edge_triggered`` is true; the
    listening socket is always edge-triggered.  Runs until closed.
    """
    with _listening_socket(ip, port) as listener, select.epoll() as ep:
        listener.setblocking(False)
        ep.register(listener.fileno(), select.EPOLLIN | select.EPOLLET)
        conn_events = select.EPOLLIN | (select.EPOLLET if edge_triggered else 0)
        conns = {}
        try:
            while True:
                try:
                    events = ep.poll()
                except OSError:
                    print("epoll failure")
                    break
                for fd, mask in events:
                    if fd == listener.fileno():
                        _accept_into(listener, ep, conns, conn_events)
                    elif mask & select.EPOLLIN:
                        conn = conns.get(fd)
                        if conn is None:
                            continue
                        print("event trigger once")
                        if edge_triggered:
                            yield from _read_edge(ep, conns, fd, conn)
                        else:
                            yield from _read_level(ep, conns, fd, conn)
                    else:
                        print("something else happened")
        finally:
            for conn in conns.values():
                conn.close()


def _read_level(ep, conns, fd, conn):
    try:
        data = conn.recv(EPOLL_BUFFER_SIZE - 1)
    except OSError:
        data = b""
    if not data:
        _drop(ep, conns, fd)
        return
    print(f"get{len(data)} bytes of content:{data.decode('latin-1')}")
    yield fd, data


def _read_edge(ep, conns, fd, conn):
    while True:
        try:
            data = conn.recv(EPOLL_BUFFER_SIZE - 1)
        except BlockingIOError:
            print("read later")
            return
        except OSError:
            _drop(ep, conns, fd)
            return
        if not data:
            _drop(ep, conns, fd)
            return
        print(f"get{len(data)} bytes of content:{data.decode('latin-1')}")
        yield fd, data


_ONESHOT_EVENTS = select.EPOLLIN | select.EPOLLET | select.EPOLLONESHOT


def _oneshot_worker(conn, ep, results):
    fd = conn.fileno()
    print(f"start new thread to receive data on fd:{fd}")
    while True:
        try:
            data = conn.recv(ONESHOT_BUFFER_SIZE - 1)
        except BlockingIOError:
            try:
                ep.modify(fd, _ONESHOT_EVENTS)
            except (OSError, ValueError):
                pass
            print("read later")
            break
        except OSError:
            break
        if not data:
            try:
                ep.unregister(fd)
            except (OSError, ValueError):
                pass
            conn.close()
            print("foreiner closed the connection")
            break
        print(f"get content:{data.decode('latin-1')}")
        results.put((fd, data))
        time.sleep(PROCESSING_DELAY)
    print(f"end thread receiving data on fd:{fd}")


def serve_oneshot(ip, port):
    """Serve clients with one-shot epoll, one worker thread per readable event.

    Yields ``(fd, data)`` for every chunk a worker reads.  Runs until closed.
    """
    results = queue.SimpleQueue()
    with _listening_socket(ip, port) as listener, select.epoll() as ep:
        listener.setblocking(False)
        ep.register(listener.fileno(), select.EPOLLIN | select.EPOLLET)
        conns = {}
        try:
            while True:
                try:
                    events = ep.poll(_POLL_INTERVAL)
                except OSError:
                    print("epoll failure")
                    break
                for fd, mask in events:
                    if fd == listener.fileno():
                        _accept_into(listener, ep, conns, _ONESHOT_EVENTS)
                    elif mask & select.EPOLLIN:
                        conn = conns.get(fd)
                        if conn is None:
                            continue
                        threading.Thread(
                            target=_oneshot_worker, args=(conn, ep, results), daemon=True
                        ).start()
                    else:
                        print("something else happened")
                while True:
                    try:
                        item = results.get_nowait()
                    except queue.Empty:
                        break
                    yield item
        finally:
            for conn in conns.values():
                conn.close()


def _atoi(text):
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def main(argv=None):
    """Command entry point: ``select|lt|et|oneshot ip_address port_number``."""
    args = sys.argv[1:] if argv is None else list(argv)
    program = os.path.basename(sys.argv[0])
    commands = ("select", "lt", "et", "oneshot")
    if len(args) < 3 or args[0] not in commands:
        for command in commands:
            print(f"usage:{program} {command} ip_address port_number")
        return 1
    command, ip, port = args[0], args[1], _atoi(args[2])
    if command == "select":
        serve_select(ip, port)
    elif command == "oneshot":
        for _ in serve_oneshot(ip, port):
            pass
    else:
        for _ in serve_epoll(ip, port, command == "et"):
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())