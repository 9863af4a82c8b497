"""ttt — tic-tac-toe that learns, from ``/usr/games/ttt``.

The player is X and moves first; the machine is O.  The machine keeps
a table of *weights*, one per board position it has reached, and plays
the move leading to the best-weighted position.  After every game the
positions it passed through are reinforced:

    ======  ======
    result  delta
    ======  ======
    win       +3
    draw      +1
    loss      -2
    ======  ======

This is the matchbox scheme of Donald Michie's MENACE (1961).  Weights
are clamped to a signed byte, -128..127.

Positions are encoded base 3 over the nine cells (empty 0, X 1, O 2),
reading the board left to right, top to bottom.

The table is kept in ``/usr/games/ttt.k`` as ``code:weight`` lines.
At the start the player is asked whether to load it ("Accumulated
knowledge?"); after each game the table is written back, and its size
is reported in "bits" (three per entry, as the original printed).
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

from unix_v4.fs.filesystem import KNOWLEDGE_PATH

if TYPE_CHECKING:
    from unix_v4.fs.filesystem import UnixFilesystem
    from unix_v4.games.io import GameIO

CELLS = 9

WINNING_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)  # fmt: skip

# Fallback when nothing has been learned: center, corners, edges.
MOVE_PRIORITY = (4, 0, 2, 6, 8, 1, 3, 5, 7)

WIN_DELTA = 3
DRAW_DELTA = 1
LOSS_DELTA = -2
WEIGHT_MIN = -128
WEIGHT_MAX = 127
BITS_PER_ENTRY = 3

_SYMBOLS = {0: " ", 1: "X", 2: "O"}


class Cell(IntEnum):
    """Contents of one board square; also the winner code."""

    EMPTY = 0
    HUMAN = 1
    COMPUTER = 2


def encode(board: list[Cell]) -> int:
    """Encode *board* as a base-3 number."""
    code = 0
    for cell in board:
        code = code * 3 + cell
    return code


def winner(board: list[Cell]) -> Cell:
    """Return the side holding a full line, or ``Cell.EMPTY``."""
    for a, b, c in WINNING_LINES:
        if board[a] is not Cell.EMPTY and board[a] == board[b] == board[c]:
            return board[a]
    return Cell.EMPTY


def parse_knowledge(data: bytes) -> dict[int, int]:
    """Parse ``code:weight`` lines, skipping anything malformed."""
    knowledge: dict[int, int] = {}
    for line in data.decode("ascii", errors="replace").splitlines():
        code, sep, weight = line.strip().partition(":")
        if not sep:
            continue
        try:
            knowledge[int(code)] = int(weight)
        except ValueError:
            continue
    return knowledge


def format_knowledge(knowledge: dict[int, int]) -> bytes:
    """Render *knowledge* as ``code:weight`` lines."""
    return "\n".join(f"{code}:{weight}" for code, weight in knowledge.items()).encode("ascii")


class TicTacToe:
    """A ttt session with a learned weight table."""

    def __init__(
        self,
        io: GameIO,
        *,
        fs: UnixFilesystem | None = None,
        knowledge_path: str = KNOWLEDGE_PATH,
    ) -> None:
        """Create a session.

        Args:
            io: The terminal to play on.
            fs: Volume holding the knowledge file.  Without one the
                machine still learns, but only for this session.
            knowledge_path: Where the weight table is kept on *fs*.

        """
        self._io = io
        self._fs = fs
        self._knowledge_path = knowledge_path
        self.board: list[Cell] = [Cell.EMPTY] * CELLS
        self.knowledge: dict[int, int] = {}
        self.history: list[int] = []
        self._dirty = False

    # -- learning --------------------------------------------------------

    def weight(self, board: list[Cell] | None = None) -> int:
        """Return the learned weight of *board* (default: current)."""
        return self.knowledge.get(encode(self.board if board is None else board), 0)

    def adjust(self, code: int, delta: int) -> None:
        """Add *delta* to the weight of *code*, clamped to a byte."""
        current = self.knowledge.get(code, 0)
        self.knowledge[code] = max(WEIGHT_MIN, min(WEIGHT_MAX, current + delta))
        self._dirty = True

    def learn(self, outcome: Cell) -> None:
        """Reinforce every position reached after a machine move."""
        if outcome is Cell.COMPUTER:
            delta = WIN_DELTA
        elif outcome is Cell.EMPTY:
            delta = DRAW_DELTA
        else:
            delta = LOSS_DELTA

        replay = [Cell.EMPTY] * CELLS
        for turn, square in enumerate(self.history):
            replay[square] = Cell.HUMAN if turn % 2 == 0 else Cell.COMPUTER
            if turn % 2 == 1:
                self.adjust(encode(replay), delta)

    def choose_move(self) -> int:
        """Pick the machine's square, or -1 if the board is full."""
        best_move = -1
        best_weight = -1000
        for square in range(CELLS):
            if self.board[square] is not Cell.EMPTY:
                continue
            self.board[square] = Cell.COMPUTER
            weight = self.weight()
            self.board[square] = Cell.EMPTY
            if weight > best_weight:
                best_weight = weight
                best_move = square

        if best_move < 0 or best_weight == 0:
            for square in MOVE_PRIORITY:
                if self.board[square] is Cell.EMPTY:
                    return square
        return best_move

    def load_knowledge(self) -> int:
        """Replace the table with the stored one; return its bits."""
        if self._fs is None:
            return 0
        data = self._fs.read(self._knowledge_path)
        if not data:
            return 0
        self.knowledge = parse_knowledge(data)
        return len(self.knowledge) * BITS_PER_ENTRY

    def save_knowledge(self) -> int:
        """Store the table if it changed; return the bits written."""
        if self._fs is None or not self._dirty:
            return 0
        if not self._fs.write(self._knowledge_path, format_knowledge(self.knowledge)):
            return 0
        self._dirty = False
        return len(self.knowledge) * BITS_PER_ENTRY

    # -- play ------------------------------------------------------------

    def render(self) -> str:
        """Draw the board as three rows with separators."""
        rows = [
            " " + " | ".join(_SYMBOLS[self.board[row * 3 + col]] for col in range(3))
            for row in range(3)
        ]
        return "\n-----------\n".join(rows) + "\n"

    def run(self) -> None:
        """Play games until the input runs out."""
        self._io.write("Tic-Tac-Toe\n")
        self._io.write("Accumulated knowledge? ")
        answer = self._io.read()
        if answer is not None and answer.strip().lower().startswith("y"):
            bits = self.load_knowledge()
            self._io.write(f"{bits} 'bits' of knowledge\n")

        while True:
            self.board = [Cell.EMPTY] * CELLS
            self.history = []
            self._io.write("new game\n")
            self._io.write("123\n456\n789\n\n")
            if not self._play_one():
                return
            bits = self.save_knowledge()
            if bits > 0:
                self._io.write(f"{bits} 'bits' returned\n")

    def _play_one(self) -> bool:
        """Play a single game; return False on EOF."""
        while True:
            self._io.write(self.render())
            self._io.write("? ")
            line = self._io.read()
            if line is None:
                return False

            try:
                square = int(line.strip()) - 1
            except ValueError:
                square = -1
            if not 0 <= square < CELLS or self.board[square] is not Cell.EMPTY:
                self._io.write("Illegal move\n")
                continue

            self.board[square] = Cell.HUMAN
            self.history.append(square)

            if winner(self.board) is Cell.HUMAN:
                self._io.write(self.render())
                self._io.write("You win\n")
                self.learn(Cell.HUMAN)
                return True

            if all(cell is not Cell.EMPTY for cell in self.board):
                self._io.write(self.render())
                self._io.write("Draw\n")
                self.learn(Cell.EMPTY)
                return True

            reply = self.choose_move()
            if reply < 0:
                self._io.write("I concede\n")
                self.learn(Cell.HUMAN)
                return True

            self.board[reply] = Cell.COMPUTER
            self.history.append(reply)

            if winner(self.board) is Cell.COMPUTER:
                self._io.write(self.render())
                self._io.write("I win\n")
                self.learn(Cell.COMPUTER)
                return True


def play(io: GameIO, fs: UnixFilesystem) -> None:
    """Run ttt on *io*, learning into ``/usr/games/ttt.k`` on *fs*."""
    TicTacToe(io, fs=fs).run()
