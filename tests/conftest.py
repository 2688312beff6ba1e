import socket
import threading

import pytest


class Listener:
    """Local TCP server that optionally greets each client, then waits for it to hang up."""

    def __init__(self, port: int = 0, greeting: bytes = b""):
        self.greeting = greeting
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind(("127.0.0.1", port))
        self.sock.listen(50)
        self.port = self.sock.getsockname()[1]
        self.accepted = 0
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        while True:
            try:
                conn, _ = self.sock.accept()
            except OSError:
                return
            self.accepted += 1
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn):
        with conn:
            try:
                if self.greeting:
                    conn.sendall(self.greeting)
                conn.settimeout(5)
                while conn.recv(1024):
                    pass
            except OSError:
                pass

    def close(self):
        try:
            # wakes the thread blocked in accept()
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.sock.close()
        self._thread.join(timeout=2)


@pytest.fixture
def listen():
    started = []

    def _listen(port: int = 0, greeting: bytes = b"") -> Listener:
        srv = Listener(port, greeting)
        started.append(srv)
        return srv

    yield _listen
    for srv in started:
        srv.close()


@pytest.fixture
def listen_port7(listen):
    try:
        return listen(7)
    except OSError as e:
        pytest.skip(f"cannot bind 127.0.0.1:7 ({e})")


@pytest.fixture
def closed_port():
    """A loopback port with nothing listening on it."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port
