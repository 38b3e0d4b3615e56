"""
2D Grid View component for the Life simulator UI.

Renders the universe's cells as a Plotly heatmap (dead = light, alive =
dark). Cell arrays come from the host's CellViewCache so repeated redraws
of an unchanged generation reuse the same view.
"""

from typing import Optional

import numpy as np
import plotly.graph_objects as go

from lifegrid.core.universe import Universe
from lifegrid.host.view import CellViewCache


_COLORSCALE = [[0.0, "#f4f4f4"], [1.0, "#222222"]]


def render_universe_grid(
    universe: Universe,
    cache: Optional[CellViewCache] = None,
    title: Optional[str] = None,
    width: int = 700,
    height: int = 700,
) -> go.Figure:
    """
    Render a heatmap of the universe's current generation.

    Row 0 is drawn at the top so the figure matches the text snapshot.

    Args:
        universe: Universe to draw.
        cache: View cache to read the 2D cell array through. None = a
            throwaway cache.
        title: Optional chart title.
        width: Plot width in pixels.
        height: Plot height in pixels.

    Returns:
        Plotly figure.
    """
    if cache is None:
        cache = CellViewCache()
    grid = cache.view(universe)

    if title is None:
        title = (
            f"Universe ({universe.width}×{universe.height}) | "
            f"Generation {universe.generation} | Alive {universe.alive_count}"
        )

    fig = go.Figure(go.Heatmap(
        z=np.asarray(grid, dtype=np.int8),
        zmin=0, zmax=1,
        colorscale=_COLORSCALE,
        showscale=False,
        xgap=1, ygap=1,
        hovertemplate="(%{x}, %{y}) = %{z}<extra></extra>",
    ))

    fig.update_layout(
        title=title,
        width=width,
        height=height,
        xaxis=dict(
            range=[-0.5, universe.width - 0.5],
            showgrid=False,
            scaleanchor="y",
            scaleratio=1,
            constrain="domain",
        ),
        yaxis=dict(
            range=[universe.height - 0.5, -0.5],
            showgrid=False,
        ),
        template="plotly_white",
        margin=dict(l=40, r=40, t=60, b=40),
    )

    return fig
