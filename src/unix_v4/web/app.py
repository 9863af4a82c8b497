"""Flask application factory for the V4 web API.

``create_app`` builds (or adopts) a volume, creates a shell without a
terminal, and returns a Flask app with these endpoints:

- ``GET /`` — ``/etc/motd`` as plain text.
- ``POST /api/execute`` — execute a command and return JSON.
- ``GET /api/stat?path=`` — inode metadata.
- ``GET /api/readdir?path=`` — directory entries in on-disk order.
- ``GET /api/read?path=`` — a file's payload, base64-encoded.

Paths that do not resolve give 404.  The games need a terminal, so
over HTTP they answer with an error message instead of starting.
"""

from __future__ import annotations

import base64
from typing import Any

from flask import Flask, Response, jsonify, request

from unix_v4.fs.filesystem import UnixFilesystem
from unix_v4.fs.inode import InodeView
from unix_v4.shell import Shell

_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404


def inode_json(info: InodeView) -> dict[str, Any]:
    """Return a JSON-ready dict for an inode snapshot."""
    return {
        "inode": info.inode_number,
        "mode": f"{int(info.mode):07o}",
        "permissions": info.permission_string(),
        "links": info.link_count,
        "uid": info.uid,
        "gid": info.gid,
        "size": info.size,
        "atime": info.atime,
        "mtime": info.mtime,
        "is_directory": info.is_directory,
        "is_regular": info.is_regular,
        "is_char_device": info.is_char_device,
    }


def _not_found(path: str) -> tuple[Response, int]:
    return jsonify({"error": f"Not found: {path}"}), _HTTP_NOT_FOUND


def create_app(fs: UnixFilesystem | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        fs: The volume to serve; a fresh one is built when omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    volume = fs if fs is not None else UnixFilesystem()
    shell = Shell(fs=volume)

    app = Flask(__name__)

    @app.route("/")
    def index() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the message of the day."""
        motd = volume.read("/etc/motd") or b""
        return Response(motd, mimetype="text/plain")

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Execute a shell command and return JSON output.

        Expects JSON body: ``{"command": "..."}``

        Returns:
            JSON with ``output`` and ``halted`` fields.

        """
        data = request.get_json(silent=True)
        if data is None or "command" not in data:
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST

        command: str = data["command"]
        result = shell.execute(command)
        if result == Shell.EXIT_SENTINEL:
            return jsonify({"output": "", "halted": True})
        return jsonify({"output": result, "halted": False})

    @app.route("/api/stat")
    def stat() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return metadata for ``?path=``."""
        path = request.args.get("path", "")
        info = volume.stat(path)
        if info is None:
            return _not_found(path)
        return jsonify({"path": path, **inode_json(info)})

    @app.route("/api/readdir")
    def readdir() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the entries of the directory at ``?path=``."""
        path = request.args.get("path", "")
        entries = volume.readdir(path)
        if entries is None:
            return _not_found(path)
        return jsonify(
            {
                "path": path,
                "entries": [{"name": e.name, **inode_json(e.inode)} for e in entries],
            }
        )

    @app.route("/api/read")
    def read() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the payload of the file at ``?path=``."""
        path = request.args.get("path", "")
        payload = volume.read(path)
        if payload is None:
            return _not_found(path)
        return jsonify(
            {
                "path": path,
                "size": len(payload),
                "data": base64.b64encode(payload).decode("ascii"),
            }
        )

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``unix-v4-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
