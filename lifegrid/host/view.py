"""
Cell-view cache for the Life simulator host.

Display code wants the cells as a (height, width) array every frame.
Building that view is cheap but not free on large grids, so it is cached
per universe. A cached entry is only reused while the universe still
holds the same backing buffer: every tick swaps the buffer and bumps
`buffer_generation`, which invalidates the entry.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from lifegrid.core.universe import Universe


@dataclass
class _CachedView:
    source: NDArray[np.uint8]
    buffer_generation: int
    shape: tuple[int, int]
    view: NDArray[np.uint8]


class CellViewCache:
    """
    Per-universe cache of 2D cell views, re-validated on every lookup.

    Attributes:
        hits: Lookups served from the cache.
        misses: Lookups that rebuilt the view.
    """

    def __init__(self):
        self._entries: dict[int, _CachedView] = {}
        self.hits: int = 0
        self.misses: int = 0

    def view(self, universe: Universe) -> NDArray[np.uint8]:
        """
        Read-only (height, width) view of `universe.cells`.

        Rebuilt whenever the universe's buffer object, buffer generation or
        shape differs from the cached entry.
        """
        key = id(universe)
        cells = universe.cells
        shape = (universe.height, universe.width)
        entry = self._entries.get(key)

        if (
            entry is not None
            and entry.source is cells
            and entry.buffer_generation == universe.buffer_generation
            and entry.shape == shape
        ):
            self.hits += 1
            return entry.view

        self.misses += 1
        view = cells.reshape(shape)
        self._entries[key] = _CachedView(
            source=cells,
            buffer_generation=universe.buffer_generation,
            shape=shape,
            view=view,
        )
        return view

    def invalidate(self, universe: Universe | None = None) -> None:
        """Drop the entry for one universe, or every entry when None."""
        if universe is None:
            self._entries.clear()
        else:
            self._entries.pop(id(universe), None)

    def __len__(self) -> int:
        return len(self._entries)
