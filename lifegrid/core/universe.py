"""
Universe (Game of Life grid) for the Life simulator.

Owns a fixed-size toroidal grid of binary cells and advances it one
generation at a time with Conway's rule (B3/S23):

  - an alive cell with 2 or 3 live neighbors survives, otherwise it dies
  - a dead cell with exactly 3 live neighbors becomes alive

Cells are stored as a flat row-major NumPy buffer: the cell at column x,
row y lives at index y * width + x. The buffer is read-only from the
outside; tick() computes the next generation into a fresh buffer and then
swaps it in, so no cell read during a tick ever sees a value written by
the same tick.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Optional

import numpy as np
from numpy.typing import NDArray

from lifegrid.core.patterns import centered_pattern_cells
from lifegrid.utils.spatial import (
    NEIGHBOR_OFFSETS,
    moore_neighbors,
    row_major_index,
    toroidal_wrap,
)


# Largest grid accepted (matches the 10000 x 10000 config limit).
MAX_CELLS = 10_000 * 10_000

DEFAULT_DEAD_GLYPH = "◻"
DEFAULT_ALIVE_GLYPH = "◼"


class Cell(IntEnum):
    """State of a single grid cell."""
    DEAD = 0
    ALIVE = 1


class InvalidDimensionsError(ValueError):
    """Raised when a Universe cannot be built with the requested shape or buffer."""


# ---------------------------------------------------------------------------
# Construction helpers
# ---------------------------------------------------------------------------

def _check_dimensions(width: int, height: int) -> None:
    """Fail fast on non-positive, non-integer or oversized dimensions."""
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDimensionsError(
                f"{name} must be an int, got {type(value).__name__}"
            )
        if value <= 0:
            raise InvalidDimensionsError(f"{name} must be > 0, got {value}")
    if int(width) * int(height) > MAX_CELLS:
        raise InvalidDimensionsError(
            f"grid {width}x{height} exceeds the maximum of {MAX_CELLS} cells"
        )


def _modulo_pattern(size: int) -> NDArray[np.uint8]:
    """Default seed: cell i is alive iff i is even or a multiple of 7."""
    idx = np.arange(size)
    return ((idx % 2 == 0) | (idx % 7 == 0)).astype(np.uint8)


def _check_glyph(name: str, glyph: str) -> None:
    if not isinstance(glyph, str) or len(glyph) != 1:
        raise ValueError(f"{name} must be a single character, got {glyph!r}")


# ---------------------------------------------------------------------------
# Universe
# ---------------------------------------------------------------------------

class Universe:
    """
    A fixed-size toroidal Game of Life grid.

    Attributes:
        width: Number of columns (fixed at construction).
        height: Number of rows (fixed at construction).
        cells: Read-only flat row-major buffer of Cell values (uint8).
        generation: Number of ticks applied so far.
        buffer_generation: Bumped every time the cell buffer is replaced.
    """

    def __init__(
        self,
        width: int,
        height: int,
        cells: Optional[Iterable[int] | NDArray] = None,
    ):
        """
        Create a universe.

        Args:
            width: Grid width, > 0.
            height: Grid height, > 0.
            cells: Initial states, either flat (width * height) or shaped
                (height, width), values 0/1 or Cell. None = default
                modulo pattern.

        Raises:
            InvalidDimensionsError: On bad dimensions or a malformed buffer.
        """
        _check_dimensions(width, height)
        self._width = int(width)
        self._height = int(height)
        size = self._width * self._height

        if cells is None:
            buffer = _modulo_pattern(size)
        else:
            buffer = np.array(cells if isinstance(cells, np.ndarray) else list(cells))
            if buffer.shape == (self._height, self._width):
                buffer = buffer.reshape(-1)
            if buffer.shape != (size,):
                raise InvalidDimensionsError(
                    f"cells must have {size} entries for a {width}x{height} grid, "
                    f"got shape {buffer.shape}"
                )
            if not np.isin(buffer, (Cell.DEAD, Cell.ALIVE)).all():
                raise InvalidDimensionsError("cells may only contain 0 (dead) or 1 (alive)")
            buffer = buffer.astype(np.uint8)

        buffer.flags.writeable = False
        self._cells: NDArray[np.uint8] = buffer
        self._generation = 0
        self._buffer_generation = 0

    # ------------------------------------------------------------------
    # Alternate constructors
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, width: int, height: int) -> Universe:
        """Universe seeded with the default deterministic modulo pattern."""
        return cls(width, height)

    @classmethod
    def empty(cls, width: int, height: int) -> Universe:
        """Universe with every cell dead."""
        _check_dimensions(width, height)
        return cls(width, height, np.zeros(width * height, dtype=np.uint8))

    @classmethod
    def from_live_cells(
        cls,
        width: int,
        height: int,
        live: Iterable[tuple[int, int]],
    ) -> Universe:
        """
        Universe where exactly the given (x, y) cells are alive.

        Coordinates outside the grid are wrapped toroidally.
        """
        _check_dimensions(width, height)
        buffer = np.zeros(width * height, dtype=np.uint8)
        for x, y in live:
            wx, wy = toroidal_wrap(x, y, width, height)
            buffer[row_major_index(wx, wy, width)] = Cell.ALIVE
        return cls(width, height, buffer)

    @classmethod
    def random(
        cls,
        width: int,
        height: int,
        seed: Optional[int] = None,
        density: float = 0.5,
    ) -> Universe:
        """
        Universe with each cell alive with probability `density`.

        Reproducible for the same (width, height, seed, density).

        Raises:
            ValueError: If density is outside [0, 1].
        """
        _check_dimensions(width, height)
        if not (0.0 <= density <= 1.0):
            raise ValueError(f"density must be in [0, 1], got {density}")
        rng = np.random.default_rng(seed)
        buffer = (rng.random(width * height) < density).astype(np.uint8)
        return cls(width, height, buffer)

    @classmethod
    def from_pattern(cls, width: int, height: int, name: str) -> Universe:
        """Universe with a named pattern (see core.patterns) centered on the grid."""
        return cls.from_live_cells(width, height, centered_pattern_cells(name, width, height))

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def cells(self) -> NDArray[np.uint8]:
        """Flat row-major cell buffer (read-only)."""
        return self._cells

    @property
    def generation(self) -> int:
        """Number of ticks applied since construction."""
        return self._generation

    @property
    def buffer_generation(self) -> int:
        """Counter bumped each time the backing buffer is replaced."""
        return self._buffer_generation

    def as_grid(self) -> NDArray[np.uint8]:
        """Read-only (height, width) view of the cell buffer."""
        return self._cells.reshape(self._height, self._width)

    def get(self, x: int, y: int) -> Cell:
        """State of the cell at column x, row y (coordinates wrap)."""
        wx, wy = toroidal_wrap(x, y, self._width, self._height)
        return Cell(int(self._cells[row_major_index(wx, wy, self._width)]))

    @property
    def alive_count(self) -> int:
        """Number of alive cells."""
        return int(np.count_nonzero(self._cells))

    @property
    def is_extinct(self) -> bool:
        """True if no cell is alive."""
        return self.alive_count == 0

    def live_cells(self) -> list[tuple[int, int]]:
        """(x, y) of every alive cell, in row-major order."""
        ys, xs = np.nonzero(self.as_grid())
        return [(int(x), int(y)) for x, y in zip(xs, ys)]

    # ------------------------------------------------------------------
    # Neighbor counting
    # ------------------------------------------------------------------

    def live_neighbor_count(self, x: int, y: int) -> int:
        """
        Number of alive cells among the 8 toroidal neighbors of (x, y).

        Counts per offset: on axes shorter than 3 cells a wrapped offset
        can land on the same cell more than once.
        """
        cells = self._cells
        width = self._width
        return sum(
            int(cells[row_major_index(nx, ny, width)])
            for nx, ny in moore_neighbors(x, y, width, self._height)
        )

    def neighbor_counts(self) -> NDArray[np.uint8]:
        """
        Live-neighbor count of every cell as a (height, width) array.

        Same semantics as live_neighbor_count(), vectorized with np.roll.
        """
        grid = self.as_grid()
        counts = np.zeros_like(grid)
        for dx, dy in NEIGHBOR_OFFSETS:
            # rolled[y, x] == grid[(y + dy) % h, (x + dx) % w]
            counts += np.roll(grid, shift=(-dy, -dx), axis=(0, 1))
        return counts

    # ------------------------------------------------------------------
    # Generation advance
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """
        Advance the universe by one generation in place.

        The next state is computed entirely from the current buffer into a
        new one, which then replaces the current buffer.
        """
        counts = self.neighbor_counts()
        alive = self.as_grid() == Cell.ALIVE

        survives = alive & ((counts == 2) | (counts == 3))
        born = ~alive & (counts == 3)

        next_cells = (survives | born).astype(np.uint8).reshape(-1)
        next_cells.flags.writeable = False

        self._cells = next_cells
        self._buffer_generation += 1
        self._generation += 1

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(
        self,
        dead_glyph: str = DEFAULT_DEAD_GLYPH,
        alive_glyph: str = DEFAULT_ALIVE_GLYPH,
    ) -> str:
        """
        Text snapshot: `height` lines of `width` glyphs joined by newlines.

        No trailing newline. Does not modify the universe.

        Raises:
            ValueError: If a glyph is not a single character or both are equal.
        """
        _check_glyph("dead_glyph", dead_glyph)
        _check_glyph("alive_glyph", alive_glyph)
        if dead_glyph == alive_glyph:
            raise ValueError(f"dead and alive glyphs must differ, both are {dead_glyph!r}")

        glyphs = np.array([dead_glyph, alive_glyph])
        rows = glyphs[self.as_grid()]
        return "\n".join("".join(row) for row in rows)

    def __str__(self) -> str:
        return self.render()

    # ------------------------------------------------------------------
    # Comparison / representation
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Universe):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and np.array_equal(self._cells, other._cells)
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"Universe(size={self._width}x{self._height}, "
            f"generation={self._generation}, alive={self.alive_count})"
        )


# ---------------------------------------------------------------------------
# Host-facing operations
# ---------------------------------------------------------------------------

def construct(width: int, height: int) -> Universe:
    """Create a universe with the default seed pattern."""
    return Universe.new(width, height)


def tick(universe: Universe) -> None:
    """Advance a universe one generation in place."""
    universe.tick()


def render(universe: Universe) -> str:
    """Text snapshot of a universe with the default glyphs."""
    return universe.render()
