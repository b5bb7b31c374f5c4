"""Connecting to a server with a bounded wait for the connection to complete."""

from __future__ import annotations

import errno
import os
import re
import select
import socket
import sys

CONNECT_TIMEOUT = 10

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_IN_PROGRESS = {errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EAGAIN}


def unblock_connect(ip, port, timeout):
    """Connect without blocking and wait up to ``timeout`` seconds for it.

    Returns the connected socket in blocking mode.  Raises TimeoutError when
    the connection is not ready in time and OSError when it fails.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setblocking(False)
    try:
        err = sock.connect_ex((ip, port))
    except OSError:
        sock.close()
        raise
    if err == 0:
        print("connect with server immediately")
        sock.setblocking(True)
        return sock
    if err not in _IN_PROGRESS:
        print("unblock connect not support")
        sock.close()
        raise OSError(err, os.strerror(err))
    _, writable, _ = select.select([], [sock], [], timeout)
    if not writable:
        print("connection time out")
        sock.close()
        raise TimeoutError("connection time out")
    error = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
    if error != 0:
        print(f"connection failed after select with the error:{error}")
        sock.close()
        raise OSError(error, os.strerror(error))
    print(f"connection ready after select with the socket:{sock.fileno()}")
    sock.setblocking(True)
    return sock


def timeout_connect(ip, port, timeout):
    """Connect with a blocking call that gives up after ``timeout`` seconds.

    Returns the connected socket in blocking mode.  Raises TimeoutError when
    the connection times out and OSError for any other failure.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(timeout)
    try:
        sock.connect((ip, port))
    except TimeoutError:
        print("connecting timeout,process timeout logic")
        sock.close()
        raise
    except OSError:
        print("error occur when connecting to server")
        sock.close()
        raise
    sock.settimeout(None)
    return sock


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
        sock = unblock_connect(args[0], _atoi(args[1]), CONNECT_TIMEOUT)
    except OSError:
        return 1
    sock.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())