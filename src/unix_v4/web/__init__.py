"""HTTP access to a V4 volume.

This package provides a Flask application that exposes the shell and
the filesystem facade as a small JSON API.  It is an **optional**
extra — install with::

    pip install unix-v4[web]

The ``create_app`` factory in ``app.py`` builds a volume and serves:

- ``GET /`` — the message of the day as plain text.
- ``POST /api/execute`` — run a shell command and return JSON.
- ``GET /api/stat``, ``/api/readdir``, ``/api/read`` — facade calls.
"""
