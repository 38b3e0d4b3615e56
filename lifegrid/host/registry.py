"""
Handle registry for the Life simulator host.

A host that cannot hold Python objects directly (a UI session, a frame
scheduler, a foreign call boundary) works with integer handles instead.
The registry maps each handle to exactly one live Universe. Handles are
issued from a monotonically increasing counter and never reused, so a
released handle stays invalid forever.
"""

from __future__ import annotations

import itertools
from typing import Iterator, Optional

from lifegrid.core.universe import Universe
from lifegrid.host.view import CellViewCache


class StaleHandleError(LookupError):
    """Raised when a handle is unknown or has already been released."""


class UniverseRegistry:
    """
    Owns Universe instances on behalf of a host, keyed by integer handle.

    Usage:
        registry = UniverseRegistry()
        handle = registry.construct(64, 32)
        text = registry.render(handle)
        registry.tick(handle)
        registry.release(handle)

    Args:
        view_cache: Cell-view cache whose entry for a universe is dropped
            when that universe is released.

    Attributes:
        released_count: Number of handles released so far.
    """

    def __init__(self, view_cache: Optional[CellViewCache] = None):
        self._universes: dict[int, Universe] = {}
        self.view_cache = view_cache
        self._ids = itertools.count(1)
        self.released_count: int = 0

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def register(self, universe: Universe) -> int:
        """Take ownership of an existing universe and return its handle."""
        handle = next(self._ids)
        self._universes[handle] = universe
        return handle

    def construct(
        self,
        width: int,
        height: int,
        universe: Optional[Universe] = None,
    ) -> int:
        """
        Create a universe with the default seed pattern and return its handle.

        Args:
            width, height: Grid dimensions.
            universe: Pre-built universe to adopt instead. Its dimensions
                must match width/height.

        Raises:
            InvalidDimensionsError: On bad dimensions.
            ValueError: If `universe` does not match width/height.
        """
        if universe is None:
            universe = Universe.new(width, height)
        elif (universe.width, universe.height) != (width, height):
            raise ValueError(
                f"universe is {universe.width}x{universe.height}, expected {width}x{height}"
            )
        return self.register(universe)

    def release(self, handle: int) -> Universe:
        """
        Invalidate a handle and return the universe it owned.

        The universe's entry in `view_cache` (if any) is dropped too.

        Raises:
            StaleHandleError: If the handle was already released or never issued.
        """
        try:
            universe = self._universes.pop(handle)
        except KeyError:
            raise StaleHandleError(f"Handle {handle} is not live (released or never issued)") from None
        if self.view_cache is not None:
            self.view_cache.invalidate(universe)
        self.released_count += 1
        return universe

    def get(self, handle: int) -> Universe:
        """
        Universe owned by `handle`.

        Raises:
            StaleHandleError: If the handle is not live.
        """
        try:
            return self._universes[handle]
        except KeyError:
            raise StaleHandleError(f"Handle {handle} is not live (released or never issued)") from None

    # ------------------------------------------------------------------
    # Host-facing operations
    # ------------------------------------------------------------------

    def tick(self, handle: int) -> None:
        """Advance the universe behind `handle` by one generation."""
        self.get(handle).tick()

    def render(self, handle: int) -> str:
        """Text snapshot of the universe behind `handle`."""
        return self.get(handle).render()

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def handles(self) -> list[int]:
        """Live handles in issue order."""
        return list(self._universes)

    def __contains__(self, handle: object) -> bool:
        return handle in self._universes

    def __len__(self) -> int:
        return len(self._universes)

    def __iter__(self) -> Iterator[int]:
        return iter(self.handles())

    def __repr__(self) -> str:
        return f"UniverseRegistry(live={len(self)}, released={self.released_count})"
