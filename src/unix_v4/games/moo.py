"""moo — Bulls and Cows, from ``/usr/games/moo``.

The machine picks a four-digit number with no repeated digits and the
player guesses until it is found.  Each guess is scored:

- a **bull** is a right digit in the right place;
- a **cow** is a right digit in the wrong place.

Bell Labs played this on paper well before the Mastermind board game
(1970) turned it into colored pegs.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unix_v4.fs.filesystem import UnixFilesystem
    from unix_v4.games.io import GameIO

DIGITS = "0123456789"
SECRET_LENGTH = 4


@dataclass(frozen=True)
class Score:
    """The result of comparing one guess with the secret."""

    bulls: int
    cows: int

    @property
    def solved(self) -> bool:
        """Return True when every digit is a bull."""
        return self.bulls == SECRET_LENGTH


def is_valid_guess(guess: str) -> bool:
    """Return True for exactly four distinct decimal digits."""
    return (
        len(guess) == SECRET_LENGTH
        and all(c in DIGITS for c in guess)
        and len(set(guess)) == SECRET_LENGTH
    )


def score(secret: str, guess: str) -> Score:
    """Count bulls and cows of *guess* against *secret*."""
    bulls = sum(1 for s, g in zip(secret, guess, strict=True) if s == g)
    cows = sum(1 for i, g in enumerate(guess) if g != secret[i] and g in secret)
    return Score(bulls=bulls, cows=cows)


class MooGame:
    """One moo session: games back to back until end of input."""

    def __init__(self, io: GameIO, *, rng: random.Random | None = None) -> None:
        """Create a session.

        Args:
            io: The terminal to play on.
            rng: Random source for secrets (seed it for repeatable games).

        """
        self._io = io
        self._rng = rng if rng is not None else random.Random()
        self.secret = ""
        self.guesses = 0

    def new_secret(self) -> str:
        """Pick four distinct digits."""
        return "".join(self._rng.sample(DIGITS, SECRET_LENGTH))

    def run(self) -> None:
        """Play until the input runs out."""
        self._io.write("MOO\n")
        while True:
            self.secret = self.new_secret()
            self.guesses = 0
            self._io.write("new game\n")
            if not self._play_one():
                return

    def _play_one(self) -> bool:
        """Play a single game; return False on EOF."""
        while True:
            self._io.write("? ")
            line = self._io.read()
            if line is None:
                return False
            guess = line.strip()
            if not is_valid_guess(guess):
                self._io.write("bad guess\n")
                continue
            self.guesses += 1
            result = score(self.secret, guess)
            if result.solved:
                self._io.write(f"4 bulls\n {self.guesses} guesses\n")
                return True
            self._io.write(f"{result.bulls} bulls; {result.cows} cows\n")


def play(io: GameIO, fs: UnixFilesystem) -> None:  # noqa: ARG001
    """Run moo on *io* (moo keeps no files)."""
    MooGame(io).run()
