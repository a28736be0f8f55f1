import threading
import urllib.request
from pathlib import Path

from portico.build.server import create_server


def test_server_serves_output_directory(tmp_path: Path):
    (tmp_path / "about").mkdir()
    (tmp_path / "about" / "index.html").write_text("<h1>About</h1>", encoding="utf-8")

    server = create_server(tmp_path, host="127.0.0.1", port=0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        port = server.server_address[1]
        with urllib.request.urlopen(f"http://127.0.0.1:{port}/about/", timeout=5) as response:  # noqa: S310
            body = response.read().decode("utf-8")
    finally:
        server.shutdown()
        server.server_close()

    assert body == "<h1>About</h1>"
