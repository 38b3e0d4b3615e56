"""
Named seed patterns for the Life simulator.

Each pattern is a tuple of live (x, y) offsets relative to the pattern's
top-left corner. Patterns are only used at construction time to build the
initial cell buffer of a Universe.
"""

from __future__ import annotations


PATTERNS: dict[str, tuple[tuple[int, int], ...]] = {
    # Still lifes
    "block": ((0, 0), (1, 0), (0, 1), (1, 1)),
    "beehive": ((1, 0), (2, 0), (0, 1), (3, 1), (1, 2), (2, 2)),
    # Period-2 oscillators
    "blinker": ((0, 0), (1, 0), (2, 0)),
    "toad": ((1, 0), (2, 0), (3, 0), (0, 1), (1, 1), (2, 1)),
    "beacon": ((0, 0), (1, 0), (0, 1), (3, 2), (2, 3), (3, 3)),
    # Spaceships
    "glider": ((1, 0), (2, 1), (0, 2), (1, 2), (2, 2)),
}


def pattern_names() -> list[str]:
    """Sorted list of available pattern names."""
    return sorted(PATTERNS)


def pattern_size(name: str) -> tuple[int, int]:
    """
    Bounding box (width, height) of a named pattern.

    Raises:
        KeyError: If the pattern is unknown.
    """
    offsets = _lookup(name)
    return (
        max(dx for dx, _ in offsets) + 1,
        max(dy for _, dy in offsets) + 1,
    )


def pattern_cells(name: str, x: int = 0, y: int = 0) -> list[tuple[int, int]]:
    """
    Live cell coordinates of a named pattern placed with its top-left at (x, y).

    Coordinates are not wrapped; Universe construction wraps them.

    Raises:
        KeyError: If the pattern is unknown.
    """
    return [(x + dx, y + dy) for dx, dy in _lookup(name)]


def centered_pattern_cells(name: str, width: int, height: int) -> list[tuple[int, int]]:
    """Live cells of a named pattern centered on a width x height grid."""
    pw, ph = pattern_size(name)
    return pattern_cells(name, (width - pw) // 2, (height - ph) // 2)


def _lookup(name: str) -> tuple[tuple[int, int], ...]:
    try:
        return PATTERNS[name]
    except KeyError:
        raise KeyError(
            f"Unknown pattern '{name}'. Available: {', '.join(pattern_names())}"
        ) from None
