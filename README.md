# sockbook

A collection of small network programs and timer containers that show the
classic patterns of socket programming: listening and accepting,
out-of-band data, connecting with a timeout, I/O multiplexing with
`select` and `epoll`, signal handling through a socket pair, and three
ways of keeping track of timeouts.

It needs Python 3.10 or later and has no dependencies outside the standard
library. The `epoll` servers in `sockbook.multiplex` only work on Linux.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Library use

### Parsing an HTTP request incrementally

`sockbook.http_request.RequestParser` is a two-level state machine: it
splits the incoming bytes into CRLF-terminated lines, then reads the
request line and the header fields. Feed it data as it arrives; each call
returns an `HttpCode`.

```python
from sockbook.http_request import HttpCode, RequestParser, answer

parser = RequestParser()
result = parser.feed(b"GET\t/index.html\tHTTP/1.1\r\nHost:\texample.com\r\n\r\n")
assert result is HttpCode.GET_REQUEST
print(parser.url, parser.host)   # /index.html example.com
print(answer(result))            # b"I get a correct result\n"
```

The fields of the request line are separated by tab characters. Only the
`GET` method and version `HTTP/1.1` are accepted, and the URL must be an
absolute path (a leading `http://host` is stripped). A `Host:` header is
recorded in `parser.host`; other headers are ignored. `NO_REQUEST` means
more data is needed, `BAD_REQUEST` that the request is malformed.

The lower-level functions `parse_line`, `parse_requestline` and
`parse_header` are also available; `parse_requestline` raises `ValueError`
for a request it does not accept.

### Timer containers

- `sockbook.sorted_timers.SortedTimerList` keeps `Timer(expire, callback,
  user_data)` objects in ascending order of expiry. It offers
  `add_timer`, `adjust_timer` (after a timer's expiry was extended),
  `del_timer` and `tick(now)`, which runs and removes every timer whose
  expiry is not after `now` (the current time by default).
- `sockbook.timer_wheel.TimeWheel(slots=60, interval=1)` hashes timers
  into a ring of slots. `add_timer(timeout, callback, user_data)` returns
  a `WheelTimer` (or `None` for a negative timeout), `del_timer` removes
  one, and each `tick()` serves the current slot and advances the wheel.
- `sockbook.timer_heap.TimeHeap(capacity, timers=None)` is a min-heap of
  `HeapTimer(delay, callback, user_data, now=None)` objects. `del_timer`
  only cancels a timer's callback; `top`, `pop_timer`, `empty` and
  `tick(now)` work on the earliest timer.

`sockbook.timed_wait.WaitTimeout(period=5000)` keeps the milliseconds left
before a periodic task across waits on a multiplexer:
`after_wait(ready, elapsed)` returns `True` when the task is due and then
resets the deadline.

### Connecting with a timeout

`sockbook.connect.unblock_connect(ip, port, timeout)` connects without
blocking and waits with `select`; `timeout_connect(ip, port, timeout)`
uses a socket timeout. Both return the connected socket, raise
`TimeoutError` when time runs out and `OSError` on any other failure.

## Commands

| Command | Arguments | What it does |
| --- | --- | --- |
| `sockbook-byteorder` | | Prints whether this machine is big or little endian. |
| `sockbook-http` | `ip port` | Accepts one connection, parses one HTTP request and sends the short answer. |
| `sockbook-connect` | `ip port` | Connects without blocking, waiting at most 10 seconds. |
| `sockbook-client` | `send ip port` | Sends `123` as normal data, then `abc` as out-of-band data. |
| | `recv ip port` | Reads and prints three messages from the server. |
| | `daytime host` | Fetches the time from the daytime service on `host`. |
| | `chat ip port` | Sends standard input to the server and prints what it sends back. |
| `sockbook-basic-server` | `listen ip port backlog` | Listens until SIGTERM. |
| | `accept ip port` | Waits 10 seconds, accepts one client and prints its address, then holds it until SIGTERM. |
| | `recv ip port` | Accepts one client and reads normal, out-of-band and normal data. |
| | `cgi ip port` | Accepts one client and sends it printed output (`abcd`). |
| `sockbook-multiplex` | `select ip port` | Reads normal and out-of-band data from one client with `select`. |
| | `lt ip port` / `et ip port` | Serves many clients with level- or edge-triggered `epoll`. |
| | `oneshot ip port` | Serves clients with one-shot `epoll` and a worker thread per event. |
| `sockbook-signal-server` | `ip port` | Accepts clients and stops cleanly on SIGTERM or SIGINT, the signals reaching the loop through a socket pair. |

For example, to run the HTTP answer server on port 8080 of the loopback
interface:

```
sockbook-http 127.0.0.1 8080
```

## What the package does not do

- There is no server that closes idle connections: the timer containers
  are libraries only and are not wired into any command.
- There is no file-serving command, and nothing that copies data with
  `sendfile`, pipes or `tee`.
- There is no multi-user chat server and no shared-memory chat; the
  `chat` client needs a server from elsewhere.
- There is no combined TCP/UDP echo server and no event-loop command with
  periodic timeouts.