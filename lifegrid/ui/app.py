"""
Life Simulator — Streamlit Web UI

Single-page viewer:
  - Sidebar builds a universe from the config fields (size, seed pattern);
    changing any of them rebuilds it
  - Step / Run / Reset controls drive it through the host registry
  - Shows the text snapshot, a heatmap and an alive-count chart
"""

import time
from copy import deepcopy

import pandas as pd
import streamlit as st

from lifegrid.core.config import SEED_MODES, get_default_config, create_universe
from lifegrid.core.patterns import pattern_names
from lifegrid.host.registry import UniverseRegistry
from lifegrid.host.view import CellViewCache
from lifegrid.ui.components.grid_view import render_universe_grid

# Must be the very first Streamlit command
st.set_page_config(
    page_title="Life Simulator",
    page_icon="◼",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ---------------------------------------------------------------------------
# Session state helpers
# ---------------------------------------------------------------------------

def _init_session_state() -> None:
    """Initialize session state for the viewer."""
    view_cache = CellViewCache()
    defaults = {
        "registry": UniverseRegistry(view_cache=view_cache),
        "view_cache": view_cache,
        "handle": None,
        "built_from": None,  # UniverseConfig the current universe was built from
        "history": [],  # list of {"generation", "alive"} dicts
    }
    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v


def _reset_universe(config) -> None:
    """Release the current universe (if any) and build a new one."""
    registry: UniverseRegistry = st.session_state.registry
    if st.session_state.handle is not None:
        registry.release(st.session_state.handle)

    universe = create_universe(config)
    st.session_state.handle = registry.register(universe)
    st.session_state.built_from = deepcopy(config.universe)
    st.session_state.history = [
        {"generation": universe.generation, "alive": universe.alive_count}
    ]


def _settings_changed(built_from, current) -> bool:
    """True when the sidebar universe settings differ from the live universe's."""
    return built_from is None or built_from != current


def _advance(frames: int, fps: float) -> None:
    """Tick the current universe `frames` times, recording history."""
    registry: UniverseRegistry = st.session_state.registry
    handle = st.session_state.handle
    for _ in range(frames):
        registry.tick(handle)
        universe = registry.get(handle)
        st.session_state.history.append(
            {"generation": universe.generation, "alive": universe.alive_count}
        )
        if fps > 0:
            time.sleep(1.0 / fps)


# ---------------------------------------------------------------------------
# Main render
# ---------------------------------------------------------------------------

def main() -> None:
    """Main entry point for the Streamlit app."""
    _init_session_state()
    config = get_default_config()

    # --- Sidebar: universe settings ---
    st.sidebar.title("◼ Life Simulator")
    st.sidebar.markdown("---")
    config.universe.width = int(st.sidebar.number_input(
        "Width", min_value=1, max_value=500, value=config.universe.width, step=1,
    ))
    config.universe.height = int(st.sidebar.number_input(
        "Height", min_value=1, max_value=500, value=config.universe.height, step=1,
    ))
    choices = list(SEED_MODES) + pattern_names()
    config.universe.pattern = st.sidebar.selectbox(
        "Seed pattern", options=choices, index=choices.index(config.universe.pattern),
    )
    config.universe.seed = int(st.sidebar.number_input(
        "Seed", min_value=0, max_value=999999999, value=config.universe.seed, step=1,
    ))
    config.universe.density = st.sidebar.slider(
        "Density (random)", min_value=0.0, max_value=1.0, value=config.universe.density,
    )
    fps = st.sidebar.slider("Frames per second", min_value=0.0, max_value=60.0,
                            value=config.loop.fps)

    errors = config.validate()
    if errors:
        for e in errors:
            st.sidebar.error(e)
        return

    if st.session_state.handle is None or _settings_changed(
        st.session_state.built_from, config.universe
    ):
        _reset_universe(config)

    # --- Controls ---
    st.title("Game of Life")
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        step_btn = st.button("⏭ Step")
    with col2:
        frames = int(st.number_input("Frames", min_value=1, max_value=1000, value=50, step=1))
    with col3:
        run_btn = st.button("▶️ Run")
    with col4:
        reset_btn = st.button("🔄 Reset")

    if reset_btn:
        _reset_universe(config)
    if step_btn:
        _advance(1, fps=0.0)
    if run_btn:
        _advance(frames, fps=fps)

    # --- Display ---
    universe = st.session_state.registry.get(st.session_state.handle)

    st.markdown("---")
    m1, m2, m3 = st.columns(3)
    m1.metric("Generation", universe.generation)
    m2.metric("Alive cells", universe.alive_count)
    m3.metric("Grid", f"{universe.width}×{universe.height}")

    left, right = st.columns(2)
    with left:
        st.plotly_chart(
            render_universe_grid(universe, cache=st.session_state.view_cache),
            use_container_width=True,
        )
    with right:
        st.code(universe.render(config.render.dead_glyph, config.render.alive_glyph),
                language=None)

    history = pd.DataFrame(st.session_state.history)
    if len(history) > 1:
        st.subheader("Alive cells over generations")
        st.line_chart(history.set_index("generation")["alive"])


if __name__ == "__main__":
    main()
