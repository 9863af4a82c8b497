"""Shell environment — the session's ``KEY=VALUE`` configuration.

The Fourth Edition shell had no exported variables yet, but the
programs around it already assumed a home directory, a user name and a
fixed list of places to look for commands.  The shell here keeps those
as an environment:

    - ``HOME`` — where a bare ``cd`` goes.
    - ``USER`` — the login name; ``root`` gets the ``#`` prompt.
    - ``PATH`` — colon-separated directories searched for programs.

``$NAME`` references in a command line are expanded before the
command runs; unknown names expand to the empty string.
"""

import re

DEFAULT_ENVIRONMENT: dict[str, str] = {
    "HOME": "/",
    "USER": "root",
    "PATH": "/bin:/usr/bin:/usr/games",
}

_VARIABLE = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


class Environment:
    """A key-value store for shell variables.

    Each instance is independent; ``copy()`` hands out a detached
    duplicate.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Create an environment.

        Args:
            initial: Starting variables (copied, not referenced).
                ``DEFAULT_ENVIRONMENT`` is used when omitted.

        """
        source = DEFAULT_ENVIRONMENT if initial is None else initial
        self._vars: dict[str, str] = dict(source)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value for *key*, or *default* if not set."""
        return self._vars.get(key, default)

    def set(self, key: str, value: str) -> None:
        """Set *key* to *value* (creates or overwrites)."""
        self._vars[key] = value

    def delete(self, key: str) -> None:
        """Remove *key* from the environment.

        Raises:
            KeyError: If *key* does not exist.

        """
        del self._vars[key]

    def items(self) -> list[tuple[str, str]]:
        """Return all (key, value) pairs."""
        return list(self._vars.items())

    def copy(self) -> "Environment":
        """Return an independent copy of this environment."""
        return Environment(initial=self._vars)

    def expand(self, text: str) -> str:
        """Replace ``$NAME`` references in *text* with their values."""
        return _VARIABLE.sub(lambda m: self._vars.get(m.group(1), ""), text)

    def search_path(self) -> list[str]:
        """Return the ``PATH`` directories in search order."""
        return [d for d in self._vars.get("PATH", "").split(":") if d]

    @property
    def is_root(self) -> bool:
        """Return True when ``USER`` is ``root``."""
        return self._vars.get("USER") == "root"

    def __len__(self) -> int:
        """Return the number of variables."""
        return len(self._vars)
