"""A Fourth Edition Unix (1973) filesystem with its shell and games.

Subpackages:

- ``unix_v4.fs`` — inode table, ``namei`` and the ``UnixFilesystem``
  facade.
- ``unix_v4.games`` — moo, ttt and wump.
- ``unix_v4.web`` — optional Flask API.
"""
