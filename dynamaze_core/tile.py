from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

Coord = Tuple[int, int]  # (row, col)
PlayerID = int


class Direction(enum.Enum):
    """One of the four cardinal directions; the value is the (d_row, d_col) unit step."""

    NORTH = (-1, 0)
    EAST = (0, 1)
    SOUTH = (1, 0)
    WEST = (0, -1)

    @property
    def quarter_turns(self) -> int:
        """Number of clockwise quarter turns from NORTH to this direction."""
        return CLOCKWISE.index(self)

    def rotated(self, quarter_turns: int) -> 'Direction':
        """Direction reached after the given number of clockwise quarter turns."""
        return CLOCKWISE[(self.quarter_turns + quarter_turns) % 4]

    def opposite(self) -> 'Direction':
        return self.rotated(2)

    def step(self, coord: Coord) -> Coord:
        """Adds this direction's unit vector to a (row, col) pair. No bounds checking."""
        dr, dc = self.value
        return coord[0] + dr, coord[1] + dc


CLOCKWISE: Tuple[Direction, ...] = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)


def opposite(d: Direction) -> Direction:
    return d.opposite()


def step(coord: Coord, d: Direction) -> Coord:
    return d.step(coord)


class Shape(enum.Enum):
    """Passage pattern of a tile before rotation."""

    I = 'I'  # noqa: E741  straight through
    L = 'L'
    T = 'T'
    BLOCK = 'X'  # no passages, never dealt at random

    def base_paths(self) -> FrozenSet[Direction]:
        """Passages of this shape when the tile is oriented NORTH."""
        return _BASE_PATHS[self]


_BASE_PATHS = {
    Shape.I: frozenset({Direction.NORTH, Direction.SOUTH}),
    Shape.L: frozenset({Direction.NORTH, Direction.EAST}),
    Shape.T: frozenset({Direction.WEST, Direction.NORTH, Direction.EAST}),
    Shape.BLOCK: frozenset(),
}

# Shapes drawn by random_tile; every orientation of each is equally likely.
DEALT_SHAPES: Tuple[Shape, ...] = (Shape.I, Shape.L, Shape.T)

_GLYPHS = {
    frozenset(): '█',
    frozenset({Direction.NORTH, Direction.SOUTH}): '│',
    frozenset({Direction.EAST, Direction.WEST}): '─',
    frozenset({Direction.NORTH, Direction.EAST}): '└',
    frozenset({Direction.EAST, Direction.SOUTH}): '┌',
    frozenset({Direction.SOUTH, Direction.WEST}): '┐',
    frozenset({Direction.WEST, Direction.NORTH}): '┘',
    frozenset({Direction.WEST, Direction.NORTH, Direction.EAST}): '┴',
    frozenset({Direction.NORTH, Direction.EAST, Direction.SOUTH}): '├',
    frozenset({Direction.EAST, Direction.SOUTH, Direction.WEST}): '┬',
    frozenset({Direction.SOUTH, Direction.WEST, Direction.NORTH}): '┤',
}


@dataclass
class Tile:
    """A single maze cell: a shape, the way it is turned, and optionally whose goal it is."""
    shape: Shape
    orientation: Direction = Direction.NORTH
    whose_target: Optional[PlayerID] = None

    def paths(self) -> FrozenSet[Direction]:
        """Directions this tile lets a token pass through."""
        turns = self.orientation.quarter_turns
        return frozenset(d.rotated(turns) for d in self.shape.base_paths())

    def rotate(self, quarter_turns: int = 1) -> None:
        """Turns the tile clockwise in place."""
        self.orientation = self.orientation.rotated(quarter_turns)

    def copy(self) -> 'Tile':
        return Tile(self.shape, self.orientation, self.whose_target)

    def glyph(self) -> str:
        return _GLYPHS.get(self.paths(), '?')


def random_tile(rng: random.Random) -> Tile:
    """Samples a tile uniformly over the dealt shapes and the four orientations."""
    return Tile(shape=rng.choice(DEALT_SHAPES), orientation=rng.choice(CLOCKWISE))
