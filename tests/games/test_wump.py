"""Tests for wump (Hunt the Wumpus)."""

import random
from collections.abc import Sequence

import pytest

from unix_v4.games.io import ScriptedIO
from unix_v4.games.wump import CAVE, NUM_ARROWS, NUM_ROOMS, Layout, Outcome, WumpGame, adjacent

QUIET = Layout(player=1, wumpus=20, pits=(13, 14), bats=(16, 17))


class _StubRandom(random.Random):
    """A random source with fixed answers."""

    def __init__(
        self,
        *,
        rooms: Sequence[int] = (1, 5, 13, 14, 16, 17),
        roll: float = 0.99,
        landing: int = 11,
    ) -> None:
        super().__init__(0)
        self._rooms = list(rooms)
        self._roll = roll
        self._landing = landing
        self.samples = 0

    def sample(  # type: ignore[override]
        self, population: Sequence[int], k: int, *, counts: object = None  # noqa: ARG002
    ) -> list[int]:
        self.samples += 1
        return self._rooms[:k]

    def random(self) -> float:
        return self._roll

    def randint(self, a: int, b: int) -> int:  # noqa: ARG002
        return self._landing

    def choice(self, seq: Sequence[int]) -> int:  # type: ignore[override]
        return seq[0]


def _game(
    layout: Layout = QUIET, *, roll: float = 0.99, landing: int = 11
) -> tuple[WumpGame, ScriptedIO]:
    io = ScriptedIO()
    game = WumpGame(io, rng=_StubRandom(roll=roll, landing=landing))
    game.apply(layout)
    return game, io


class TestCave:
    """Verify the dodecahedron."""

    def test_twenty_rooms(self) -> None:
        """The cave has 20 rooms."""
        assert len(CAVE) == NUM_ROOMS == 20

    @pytest.mark.parametrize("room", range(1, NUM_ROOMS + 1))
    def test_tunnels_are_two_way(self, room: int) -> None:
        """Every tunnel can be walked back."""
        for other in adjacent(room):
            assert room in adjacent(other)

    def test_three_distinct_tunnels(self) -> None:
        """Each room joins three different rooms, never itself."""
        for room in range(1, NUM_ROOMS + 1):
            tunnels = adjacent(room)
            assert len(set(tunnels)) == 3
            assert room not in tunnels


class TestLayout:
    """Verify placement."""

    def test_new_layout_uses_distinct_rooms(self) -> None:
        """Player, wumpus, pits and bats never share a room."""
        game = WumpGame(ScriptedIO(), rng=random.Random(7))
        for _ in range(50):
            layout = game.new_layout()
            rooms = [layout.player, layout.wumpus, *layout.pits, *layout.bats]
            assert len(set(rooms)) == len(rooms) == 6
            assert all(1 <= r <= NUM_ROOMS for r in rooms)

    def test_apply_refills_quiver(self) -> None:
        """Applying a layout restores the arrows."""
        game, _io = _game()
        game.arrows = 1
        game.apply(QUIET)
        assert game.arrows == NUM_ARROWS


class TestWarnings:
    """Verify the room report."""

    def test_quiet_room(self) -> None:
        """Far hazards give no warnings."""
        game, _io = _game()
        assert game.warnings() == []

    def test_wumpus_next_door(self) -> None:
        """The wumpus can be smelt one room away."""
        game, _io = _game(Layout(player=1, wumpus=2, pits=(13, 14), bats=(16, 17)))
        assert game.warnings() == ["I smell a wumpus"]

    def test_wumpus_two_rooms_away(self) -> None:
        """The wumpus can be smelt two rooms away."""
        game, _io = _game(Layout(player=1, wumpus=3, pits=(13, 14), bats=(16, 17)))
        assert game.warnings() == ["I smell a wumpus"]

    def test_bats_and_draft(self) -> None:
        """Neighbouring bats and pits are reported."""
        game, _io = _game(Layout(player=1, wumpus=20, pits=(2, 14), bats=(5, 17)))
        assert game.warnings() == ["Bats nearby", "I feel a draft"]

    def test_describe(self) -> None:
        """The report names the room and its tunnels."""
        game, _io = _game()
        assert game.describe() == "\nYou are in room 1\nThere are tunnels to 2 5 8\n"


class TestMoving:
    """Verify walking through the cave."""

    def test_move_through_tunnel(self) -> None:
        """A connected room can be entered."""
        game, _io = _game()
        assert game.move(2) is Outcome.CONTINUE
        assert game.player == 2

    def test_hit_the_wall(self) -> None:
        """A room with no tunnel cannot be entered."""
        game, io = _game()
        assert game.move(20) is Outcome.CONTINUE
        assert game.player == 1
        assert "You hit the wall" in io.output

    def test_fall_into_pit(self) -> None:
        """Walking into a pit loses."""
        game, io = _game(Layout(player=1, wumpus=20, pits=(8, 14), bats=(16, 17)))
        assert game.move(8) is Outcome.LOSE
        assert "You fell into a pit" in io.output

    def test_eaten(self) -> None:
        """Walking into the wumpus loses."""
        game, io = _game(Layout(player=1, wumpus=2, pits=(13, 14), bats=(16, 17)))
        assert game.move(2) is Outcome.LOSE
        assert "You were eaten by the wumpus" in io.output

    def test_bats_carry_player(self) -> None:
        """A bat drops the player in a random room."""
        game, io = _game(Layout(player=1, wumpus=20, pits=(13, 14), bats=(2, 17)), landing=11)
        assert game.move(2) is Outcome.CONTINUE
        assert game.player == 11
        assert "There's a bat in your room" in io.output

    def test_bats_drop_player_in_pit(self) -> None:
        """A bat can drop the player straight into a pit."""
        game, io = _game(Layout(player=1, wumpus=20, pits=(11, 14), bats=(2, 17)), landing=11)
        assert game.move(2) is Outcome.LOSE
        assert "You fell into a pit" in io.output


class TestShooting:
    """Verify crooked arrows."""

    def test_slay_wumpus(self) -> None:
        """An arrow into the wumpus's room wins."""
        game, io = _game(Layout(player=1, wumpus=5, pits=(13, 14), bats=(16, 17)))
        assert game.shoot([5]) is Outcome.WIN
        assert "You slew the wumpus" in io.output

    def test_arrow_through_several_rooms(self) -> None:
        """The arrow follows a connected path."""
        game, _io = _game(Layout(player=1, wumpus=6, pits=(13, 14), bats=(16, 17)))
        assert game.shoot([5, 6]) is Outcome.WIN

    def test_shoot_yourself(self) -> None:
        """An arrow that returns to the player's room loses."""
        game, io = _game()
        assert game.shoot([2, 1]) is Outcome.LOSE
        assert "You shot yourself" in io.output

    def test_unconnected_step_takes_random_tunnel(self) -> None:
        """A step with no tunnel goes down a random one instead."""
        # From room 5 the stub picks the first tunnel, which is room 1.
        game, io = _game()
        assert game.shoot([5, 20]) is Outcome.LOSE
        assert "You shot yourself" in io.output

    def test_miss_uses_an_arrow(self) -> None:
        """A miss costs an arrow and the game goes on."""
        game, _io = _game()
        assert game.shoot([8]) is Outcome.CONTINUE
        assert game.arrows == NUM_ARROWS - 1

    def test_wumpus_wakes_and_eats(self) -> None:
        """A woken wumpus that moves onto the player ends the game."""
        game, io = _game(Layout(player=1, wumpus=2, pits=(13, 14), bats=(16, 17)), roll=0.0)
        assert game.shoot([8]) is Outcome.LOSE
        assert game.wumpus == 1
        assert "The wumpus got you" in io.output

    def test_wumpus_may_stay(self) -> None:
        """A quarter of the time the wumpus stays put."""
        game, _io = _game(roll=0.99)
        game.move_wumpus()
        assert game.wumpus == 20

    def test_last_arrow(self) -> None:
        """Missing with the last arrow loses."""
        game, io = _game()
        game.arrows = 1
        assert game.shoot([8]) is Outcome.LOSE
        assert "That was your last shot" in io.output


class TestSession:
    """Verify the interactive loop."""

    def test_instructions(self) -> None:
        """Answering yes prints the rules."""
        io = ScriptedIO(["y"])
        WumpGame(io, rng=_StubRandom()).run()
        assert "Hazards:" in io.output

    def test_no_instructions(self) -> None:
        """Answering no skips them."""
        io = ScriptedIO(["n"])
        WumpGame(io, rng=_StubRandom()).run()
        assert "Hazards:" not in io.output
        assert "You are in room 1" in io.output

    def test_win_and_quit(self) -> None:
        """A winning shot ends the game and asks for another."""
        io = ScriptedIO(["n", "s", "5", "0", "n"])
        WumpGame(io, rng=_StubRandom()).run()
        assert "You slew the wumpus" in io.output
        assert "Another game? (y-n) " in io.output
        assert "Same room setup?" not in io.output

    def test_same_room_setup(self) -> None:
        """Replaying the same setup restarts from the same rooms."""
        io = ScriptedIO(["n", "s", "2", "1", "0", "y", "y"])
        rng = _StubRandom(rooms=(1, 3, 13, 14, 16, 17))
        game = WumpGame(io, rng=rng)
        game.run()
        assert "You shot yourself" in io.output
        assert io.output.count("You are in room 1") == 2
        assert rng.samples == 1

    def test_new_room_setup(self) -> None:
        """Declining the same setup places everything again."""
        io = ScriptedIO(["n", "s", "2", "1", "0", "y", "n"])
        rng = _StubRandom(rooms=(1, 3, 13, 14, 16, 17))
        WumpGame(io, rng=rng).run()
        assert rng.samples == 2

    def test_invalid_room(self) -> None:
        """A room outside 1..20 is refused."""
        io = ScriptedIO(["n", "m", "42"])
        WumpGame(io, rng=_StubRandom()).run()
        assert "Invalid room" in io.output

    def test_empty_arrow_path(self) -> None:
        """An arrow needs at least one room."""
        io = ScriptedIO(["n", "s", "0"])
        WumpGame(io, rng=_StubRandom()).run()
        assert "You need to aim somewhere!" in io.output
