import os
import signal
import socket
import threading

from sockbook.signal_server import SignalServer, main


def test_stop_delivers_sigterm_from_other_thread():
    srv = SignalServer("127.0.0.1", 0)
    outcome = []
    thread = threading.Thread(target=lambda: outcome.append(srv.serve_forever()), daemon=True)
    thread.start()
    srv.stop()
    thread.join(5)
    assert not thread.is_alive()
    assert outcome == [[signal.SIGTERM]]


def test_real_signals_are_piped_to_loop():
    before = signal.getsignal(signal.SIGHUP)
    srv = SignalServer("127.0.0.1", 0)
    pid = os.getpid()
    hup = threading.Timer(0.1, os.kill, (pid, signal.SIGHUP))
    term = threading.Timer(0.4, os.kill, (pid, signal.SIGTERM))
    hup.start()
    term.start()
    try:
        handled = srv.serve_forever()
    finally:
        hup.cancel()
        term.cancel()
    assert handled == [signal.SIGHUP, signal.SIGTERM]
    assert signal.getsignal(signal.SIGHUP) == before


def test_main_reports_bind_failure(capsys):
    srv = SignalServer("127.0.0.1", 0)
    try:
        assert main(["127.0.0.1", str(srv.address[1])]) == 1
        assert "errno is" in capsys.readouterr().out
    finally:
        srv.stop()
        assert srv.serve_forever() == [signal.SIGTERM]


def test_main_without_arguments_prints_usage(capsys):
    assert main([]) == 1
    assert "ip_address port_number" in capsys.readouterr().out