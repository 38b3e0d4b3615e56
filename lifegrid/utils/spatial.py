"""
Spatial utilities for the Life simulator.

Provides toroidal (wrap-around) grid math: coordinate wrapping, row-major
indexing and Moore-neighborhood enumeration.

All functions assume a 2D grid with dimensions (width, height) where
coordinates wrap: x % width, y % height.
"""

from __future__ import annotations


# The 8 Moore-neighborhood offsets (dx, dy), center excluded.
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy)
    for dy in (-1, 0, 1)
    for dx in (-1, 0, 1)
    if not (dx == 0 and dy == 0)
)


def toroidal_wrap(x: int, y: int, width: int, height: int) -> tuple[int, int]:
    """
    Wrap (x, y) coordinates to stay within grid bounds.

    Args:
        x, y: Raw coordinates (may be negative or >= dimensions).
        width, height: Grid dimensions.

    Returns:
        Wrapped (x, y) tuple within [0, width) and [0, height).
    """
    return x % width, y % height


def row_major_index(x: int, y: int, width: int) -> int:
    """
    Flat buffer index of column x, row y in a row-major grid.

    Coordinates are not wrapped; callers wrap first if needed.
    """
    return y * width + x


def index_to_xy(index: int, width: int) -> tuple[int, int]:
    """Inverse of row_major_index: flat index → (x, y)."""
    y, x = divmod(index, width)
    return x, y


def moore_neighbors(
    x: int, y: int,
    width: int, height: int,
) -> list[tuple[int, int]]:
    """
    Enumerate the 8 Moore neighbors of (x, y) on a torus.

    One entry per offset, so on grids narrower than 3 cells along an axis
    the same position (or (x, y) itself) can appear more than once.

    Args:
        x, y: Center position.
        width, height: Grid dimensions.

    Returns:
        List of 8 wrapped (x, y) tuples in NEIGHBOR_OFFSETS order.
    """
    return [
        toroidal_wrap(x + dx, y + dy, width, height)
        for dx, dy in NEIGHBOR_OFFSETS
    ]
