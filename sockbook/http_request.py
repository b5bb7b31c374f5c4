"""Incremental HTTP request parsing driven by a line reader and a request state machine."""

from __future__ import annotations

import os
import re
import socket
import sys
from enum import Enum

BUFFER_SIZE = 4096

_CORRECT_RESULT = b"I get a correct result\n"
_WRONG_RESULT = b"Something wrong\n "

_END_OF_LINE = re.compile(rb"[\r\n]")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class CheckState(Enum):
    """What the request parser is currently reading."""

    REQUESTLINE = 0
    HEADER = 1


class LineStatus(Enum):
    """Outcome of looking for one complete line."""

    OK = 0
    BAD = 1
    OPEN = 2


class HttpCode(Enum):
    """Result of processing the data received so far."""

    NO_REQUEST = 0
    GET_REQUEST = 1
    BAD_REQUEST = 2
    FORBIDDEN_REQUEST = 3
    INTERNAL_ERROR = 4
    CLOSED_CONNECTION = 5


def parse_line(buffer, start):
    """Look for the end of a CRLF-terminated line in ``buffer`` from ``start``.

    Returns ``(status, index)``: on ``OK`` the index is just past the line
    terminator, otherwise it is where scanning has to resume.
    """
    match = _END_OF_LINE.search(buffer, start)
    if match is None:
        return LineStatus.OPEN, max(start, len(buffer))
    index = match.start()
    if buffer[index] == 0x0D:
        if index + 1 == len(buffer):
            return LineStatus.OPEN, index
        if buffer[index + 1] == 0x0A:
            return LineStatus.OK, index + 2
        return LineStatus.BAD, index
    if index > 1 and buffer[index - 1] == 0x0D:
        return LineStatus.OK, index + 1
    return LineStatus.BAD, index


def parse_requestline(line):
    """Validate a tab-separated request line and return its URL path.

    Raises ValueError when the line is not a ``GET`` request for
    ``HTTP/1.1`` with an absolute path.
    """
    method, sep, rest = line.partition("\t")
    if not sep:
        raise ValueError("request line has no separator")
    if method.lower() != "get":
        raise ValueError(f"unsupported method {method!r}")
    print("The request method is GET")
    url, sep, version = rest.lstrip("\t").partition("\t")
    if not sep:
        raise ValueError("request line has no version")
    version = version.lstrip("\t")
    if version.lower() != "http/1.1":
        raise ValueError(f"unsupported version {version!r}")
    if url[:7].lower() == "http://":
        remainder = url[7:]
        slash = remainder.find("/")
        url = remainder[slash:] if slash >= 0 else ""
    if not url.startswith("/"):
        raise ValueError(f"invalid url {url!r}")
    print(f"The request URL is:{url}")
    return url


def parse_header(line):
    """Handle one header line; return ``(code, host)``.

    An empty line completes the request.  ``host`` is the value of a
    ``Host:`` header and ``None`` for any other line.
    """
    if line == "":
        return HttpCode.GET_REQUEST, None
    if line[:5].lower() == "host:":
        host = line[5:].lstrip("\t")
        print(f"the request host is:{host}")
        return HttpCode.NO_REQUEST, host
    print("I can not handle this header")
    return HttpCode.NO_REQUEST, None


class RequestParser:
    """Accumulates client data and parses it as it arrives."""

    def __init__(self):
        self._buffer = bytearray()
        self._checked = 0
        self._line_start = 0
        self.state = CheckState.REQUESTLINE
        self.url = None
        self.host = None

    def feed(self, data):
        """Add received bytes and parse every complete line they finish."""
        self._buffer.extend(data)
        while True:
            status, self._checked = parse_line(self._buffer, self._checked)
            if status is not LineStatus.OK:
                break
            raw = bytes(self._buffer[self._line_start:self._checked - 2])
            self._line_start = self._checked
            text = raw.split(b"\0", 1)[0].decode("latin-1")
            if self.state is CheckState.REQUESTLINE:
                try:
                    self.url = parse_requestline(text)
                except ValueError:
                    return HttpCode.BAD_REQUEST
                self.state = CheckState.HEADER
            elif self.state is CheckState.HEADER:
                code, host = parse_header(text)
                if host is not None:
                    self.host = host
                if code is HttpCode.GET_REQUEST:
                    return HttpCode.GET_REQUEST
            else:
                return HttpCode.INTERNAL_ERROR
        if status is LineStatus.OPEN:
            return HttpCode.NO_REQUEST
        return HttpCode.BAD_REQUEST


def answer(result):
    """Bytes sent back to the client for a final parse result."""
    return _CORRECT_RESULT if result is HttpCode.GET_REQUEST else _WRONG_RESULT


def serve(host, port):
    """Accept one client, parse its request and reply; return the result."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind((host, port))
        listener.listen(5)
        try:
            conn, _ = listener.accept()
        except OSError as exc:
            print(f"errno is:{exc.errno}")
            return None
        with conn:
            parser = RequestParser()
            received = 0
            while True:
                try:
                    data = conn.recv(BUFFER_SIZE - received)
                except OSError:
                    print("reading failed")
                    return None
                if not data:
                    print("remote client has closed the connection")
                    return None
                received += len(data)
                result = parser.feed(data)
                if result is HttpCode.NO_REQUEST:
                    continue
                conn.sendall(answer(result))
                return result


def _atoi(text):
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def main(argv=None):
    """Command entry point: ``ip_address port_number``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) < 2:
        print(f"usage:{os.path.basename(sys.argv[0])} ip_address port_number")
        return 1
    serve(args[0], _atoi(args[1]))
    return 0


if __name__ == "__main__":
    sys.exit(main())