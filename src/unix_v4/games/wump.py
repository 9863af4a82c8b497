"""wump — Hunt the Wumpus, from ``/usr/games/wump``.

Gregory Yob's 1973 game.  The cave is a dodecahedron: 20 rooms, each
joined to exactly 3 others.  Somewhere in it sleeps the wumpus; two
rooms hold bottomless pits and two hold super bats.  The player moves
room to room on the strength of three warnings:

- ``I smell a wumpus`` — the wumpus is one or two rooms away;
- ``Bats nearby`` — a bat room is next door;
- ``I feel a draft`` — a pit is next door.

and wins by shooting a crooked arrow (up to five rooms long) into the
wumpus's room.  A miss wakes the wumpus, which moves to a neighbouring
room three times out of four.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unix_v4.fs.filesystem import UnixFilesystem
    from unix_v4.games.io import GameIO

# Room n (1-based) connects to CAVE[n - 1].
CAVE: tuple[tuple[int, int, int], ...] = (
    (2, 5, 8), (1, 3, 10), (2, 4, 12), (3, 5, 14), (1, 4, 6),
    (5, 7, 15), (6, 8, 17), (1, 7, 9), (8, 10, 18), (2, 9, 11),
    (10, 12, 19), (3, 11, 13), (12, 14, 20), (4, 13, 15), (6, 14, 16),
    (15, 17, 20), (7, 16, 18), (9, 17, 19), (11, 18, 20), (13, 16, 19),
)  # fmt: skip

NUM_ROOMS = len(CAVE)
NUM_TUNNELS = 3
NUM_PITS = 2
NUM_BATS = 2
NUM_ARROWS = 5
MAX_ARROW_PATH = 5
WUMPUS_MOVE_CHANCE = 0.75

INSTRUCTIONS = f"""\
Welcome to 'Hunt the Wumpus.'
The Wumpus lives in a cave of {NUM_ROOMS} rooms.
Each room has {NUM_TUNNELS} tunnels leading to other rooms.

Hazards:
Bottomless Pits - Some rooms have Bottomless Pits in them.
    If you go there, you fall into the pit and lose!
Super Bats - Some other rooms have super bats.
    If you go there, a bat will grab you and take you to
    somewhere else in the cave where you could
    fall into a pit or run into the...

Wumpus:
The Wumpus is not bothered by the hazards since
he has sucker feet and is too big for a bat to lift.
Usually he is asleep.
Two things wake him up:
    your entering his room
    your shooting an arrow anywhere in the cave.
If the wumpus wakes, he either decides to move one room or
stay where he was. But if he ends up where you are,
he eats you up and you lose!

You:
Each turn you may either move or shoot a crooked arrow.
Moving - You can move to one of the adjoining rooms.
Shooting - You have {NUM_ARROWS} arrows. You lose when you run out.
    Each arrow can go from 1 to {MAX_ARROW_PATH} rooms.
    You aim by telling the computer the arrow's path.
    The list is terminated with a 0.

Warnings:
When you are one or two rooms away from the wumpus:
        'I smell a Wumpus'
When you are one room away from some other hazard:
        Bat - 'Bats nearby'
        Pit - 'I feel a draft'

"""


class Outcome(StrEnum):
    """How a turn left the game."""

    CONTINUE = "continue"
    WIN = "win"
    LOSE = "lose"


@dataclass(frozen=True)
class Layout:
    """Where everything starts; kept so a game can be replayed."""

    player: int
    wumpus: int
    pits: tuple[int, ...]
    bats: tuple[int, ...]


def adjacent(room: int) -> tuple[int, int, int]:
    """Return the three rooms joined to *room*."""
    return CAVE[room - 1]


def _yes(answer: str | None) -> bool:
    return answer is not None and answer.strip().lower().startswith("y")


def _parse_room(line: str) -> int | None:
    try:
        return int(line.strip())
    except ValueError:
        return None


class WumpGame:
    """A wump session."""

    def __init__(self, io: GameIO, *, rng: random.Random | None = None) -> None:
        """Create a session.

        Args:
            io: The terminal to play on.
            rng: Random source for placement, bats, arrows and the
                wumpus (seed it for repeatable games).

        """
        self._io = io
        self._rng = rng if rng is not None else random.Random()
        self.player = 0
        self.wumpus = 0
        self.pits: list[int] = []
        self.bats: list[int] = []
        self.arrows = NUM_ARROWS

    # -- setup -----------------------------------------------------------

    def random_room(self) -> int:
        """Return a random room number, 1 to 20."""
        return self._rng.randint(1, NUM_ROOMS)

    def new_layout(self) -> Layout:
        """Place player, wumpus, pits and bats in distinct rooms."""
        rooms = self._rng.sample(range(1, NUM_ROOMS + 1), 2 + NUM_PITS + NUM_BATS)
        return Layout(
            player=rooms[0],
            wumpus=rooms[1],
            pits=tuple(rooms[2 : 2 + NUM_PITS]),
            bats=tuple(rooms[2 + NUM_PITS :]),
        )

    def apply(self, layout: Layout) -> None:
        """Reset the game to *layout* with a full quiver."""
        self.player = layout.player
        self.wumpus = layout.wumpus
        self.pits = list(layout.pits)
        self.bats = list(layout.bats)
        self.arrows = NUM_ARROWS

    # -- rules -----------------------------------------------------------

    def warnings(self) -> list[str]:
        """Return the warnings for the player's current room."""
        near = adjacent(self.player)
        messages: list[str] = []
        if self.wumpus in near or any(self.wumpus in adjacent(room) for room in near):
            messages.append("I smell a wumpus")
        if any(bat in near for bat in self.bats):
            messages.append("Bats nearby")
        if any(pit in near for pit in self.pits):
            messages.append("I feel a draft")
        return messages

    def describe(self) -> str:
        """Return the room report printed before each turn."""
        lines = [f"\nYou are in room {self.player}", *self.warnings()]
        tunnels = " ".join(str(room) for room in adjacent(self.player))
        lines.append(f"There are tunnels to {tunnels}")
        return "\n".join(lines) + "\n"

    def enter_room(self) -> Outcome:
        """Resolve hazards in the player's room, following bats."""
        while True:
            if self.player in self.pits:
                self._io.write("You fell into a pit\n")
                return Outcome.LOSE
            if self.player == self.wumpus:
                self._io.write("You were eaten by the wumpus\n")
                return Outcome.LOSE
            if self.player not in self.bats:
                return Outcome.CONTINUE
            self._io.write("There's a bat in your room\n")
            self.player = self.random_room()

    def move(self, room: int) -> Outcome:
        """Walk to *room* if a tunnel leads there."""
        if room not in adjacent(self.player):
            self._io.write("You hit the wall\n")
            return Outcome.CONTINUE
        self.player = room
        return self.enter_room()

    def move_wumpus(self) -> None:
        """Wake the wumpus; it usually wanders to a neighbour."""
        if self._rng.random() < WUMPUS_MOVE_CHANCE:
            self.wumpus = self._rng.choice(adjacent(self.wumpus))

    def shoot(self, path: list[int]) -> Outcome:
        """Fly an arrow along *path*.

        A step to a room with no tunnel from the arrow's current room
        sends it down a random tunnel instead.
        """
        self.arrows -= 1
        current = self.player
        for target in path:
            if target in adjacent(current):
                current = target
            else:
                current = self._rng.choice(adjacent(current))
            if current == self.wumpus:
                self._io.write("You slew the wumpus\n")
                return Outcome.WIN
            if current == self.player:
                self._io.write("You shot yourself\n")
                return Outcome.LOSE

        self.move_wumpus()
        if self.wumpus == self.player:
            self._io.write("The wumpus got you\n")
            return Outcome.LOSE
        if self.arrows == 0:
            self._io.write("That was your last shot\n")
            return Outcome.LOSE
        return Outcome.CONTINUE

    # -- session ---------------------------------------------------------

    def run(self) -> None:
        """Play games until the player quits or input runs out."""
        self._io.write("Welcome to 'Hunt the Wumpus.'\n")
        self._io.write(f"The Wumpus lives in a cave of {NUM_ROOMS} rooms.\n")
        self._io.write(f"Each room has {NUM_TUNNELS} tunnels leading to other rooms.\n")
        self._io.write("Instructions? (y-n) ")
        if _yes(self._io.read()):
            self._io.write(INSTRUCTIONS)

        layout = self.new_layout()
        while True:
            self.apply(layout)
            if self._play_one() is None:
                return
            self._io.write("Another game? (y-n) ")
            if not _yes(self._io.read()):
                return
            self._io.write("Same room setup? (y-n) ")
            if not _yes(self._io.read()):
                layout = self.new_layout()

    def _play_one(self) -> Outcome | None:
        """Play one game; return its outcome, or None on EOF."""
        outcome = Outcome.CONTINUE
        while outcome is Outcome.CONTINUE:
            self._io.write(self.describe())
            self._io.write("\nMove or shoot (m-s) ")
            action = self._io.read()
            if action is None:
                return None
            command = action.strip().lower()

            if command.startswith("m"):
                self._io.write("which room? ")
                line = self._io.read()
                if line is None:
                    return None
                room = _parse_room(line)
                if room is None or not 1 <= room <= NUM_ROOMS:
                    self._io.write("Invalid room\n")
                    continue
                outcome = self.move(room)

            elif command.startswith("s"):
                path = self._read_arrow_path()
                if path is None:
                    return None
                if not path:
                    self._io.write("You need to aim somewhere!\n")
                    continue
                outcome = self.shoot(path)

        return outcome

    def _read_arrow_path(self) -> list[int] | None:
        """Read up to five rooms ending with 0; None on EOF."""
        self._io.write("Give list of rooms terminated by 0\n")
        path: list[int] = []
        while len(path) < MAX_ARROW_PATH:
            line = self._io.read()
            if line is None:
                return None
            room = _parse_room(line)
            if room == 0:
                break
            if room is None or not 1 <= room <= NUM_ROOMS:
                continue
            path.append(room)
        return path


def play(io: GameIO, fs: UnixFilesystem) -> None:  # noqa: ARG001
    """Run wump on *io* (wump keeps no files)."""
    WumpGame(io).run()
