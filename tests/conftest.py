import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # Keep runner variables from the host (or a real Actions job) out of the tests
    import os

    for key in list(os.environ):
        if key.startswith("INPUT_") or key.startswith("GITHUB_"):
            monkeypatch.delenv(key, raising=False)
    for key in ("LINEAR_API_KEY", "MAX_CONCURRENCY"):
        monkeypatch.delenv(key, raising=False)
    import relnotes.config as cfg

    monkeypatch.setattr(cfg, "IN_GITHUB_ACTIONS", False)


@pytest.fixture
def linear_api():
    """A FakeLinearAPI served on a local threaded HTTP server."""
    import threading
    from http.server import ThreadingHTTPServer

    from fakes import FakeLinearAPI, LinearAPIHandler

    api = FakeLinearAPI()
    server = ThreadingHTTPServer(("127.0.0.1", 0), LinearAPIHandler)
    server.linear = api
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    api.url = f"http://127.0.0.1:{server.server_address[1]}/graphql"
    try:
        yield api
    finally:
        server.shutdown()
        server.server_close()
