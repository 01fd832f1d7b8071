import threading
import time

import pytest
import uvicorn

from rocksdb_client import StoreClient

from .fake_server import PASSWORD, USERNAME, create_app, free_port


class RunningServer:
    """A fake storage server served by uvicorn in a background thread."""

    def __init__(self, app):
        self.app = app
        self.port = free_port()
        self.server = uvicorn.Server(uvicorn.Config(app, host="127.0.0.1", port=self.port, log_level="warning"))
        self.thread = threading.Thread(target=self.server.run, daemon=True)

    def start(self):
        self.thread.start()
        deadline = time.time() + 10
        while not self.server.started:
            if time.time() > deadline or not self.thread.is_alive():
                raise RuntimeError("fake server did not start")
            time.sleep(0.01)
        return self

    def stop(self):
        self.server.should_exit = True
        self.thread.join(timeout=10)

    @property
    def headers(self):
        return self.app.state.headers


@pytest.fixture
def running_server():
    """Fake server without authentication."""
    server = RunningServer(create_app()).start()
    yield server
    server.stop()


@pytest.fixture
def auth_server():
    """Fake server requiring USERNAME/PASSWORD."""
    server = RunningServer(create_app(USERNAME, PASSWORD)).start()
    yield server
    server.stop()


@pytest.fixture
def client(running_server):
    with StoreClient(port=running_server.port) as client:
        yield client
