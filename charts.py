"""
Plotly figures and table rows for the Streamlit front end.

Kept separate from app.py so they can be built (and tested) without a
running Streamlit session.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import plotly.graph_objects as go            # Interactive plotting library

from engine import ReplacementPolicy, SimulationStep, Stats
from utils import page_color


def frame_figure(step: Optional[SimulationStep], frame_count: int) -> go.Figure:
    """
    Bar chart of the frame pool after a step.

    Each frame is one bar labelled "F<frame>: P<page>" or "F<frame>: Free".
    The frame loaded by the step gets a thick outline. With no step (nothing
    simulated yet) every frame is shown free.
    """
    fig = go.Figure()

    x = []       # Frame indices
    y = []       # Bar heights (all 1 for uniform display)
    text = []    # Labels for each frame
    colors = []  # Color per resident page, grey when free
    widths = []  # Outline width, thick for the frame loaded this step

    for frame_no in range(frame_count):
        frame = step.frames[frame_no] if step is not None else None
        page_no = frame.page_no if frame is not None else None
        text.append(f"F{frame_no}: " + (f"P{page_no}" if page_no is not None else "Free"))
        colors.append(page_color(page_no))
        widths.append(4 if frame is not None and frame.just_loaded else 0)
        x.append(frame_no)
        y.append(1)

    fig.add_trace(go.Bar(
        x=x,
        y=y,
        text=text,
        marker_color=colors,
        marker_line_color="crimson",
        marker_line_width=widths,
        hovertext=text,
        hoverinfo='text'
    ))

    title = None
    if step is not None:
        title = f"Step {step.index + 1}: page {step.requested_page} -> {'HIT' if step.hit else 'FAULT'}"

    fig.update_layout(
        height=180,
        title=title,
        showlegend=False,
        yaxis=dict(showticklabels=False)
    )
    return fig


def comparison_figure(results: Dict[ReplacementPolicy, Stats]) -> go.Figure:
    """Page faults per algorithm for the same input."""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=[policy.value for policy in results],
        y=[stats.faults for stats in results.values()],
        name="Page Faults",
        marker_color="rgba(79, 70, 229, 0.7)",
    ))
    fig.update_layout(
        height=320,
        title="Algorithm Performance Comparison",
        yaxis=dict(title="Number of Page Faults", rangemode="tozero"),
    )
    return fig


def fault_curve_figure(curves: Dict[ReplacementPolicy, List[Tuple[int, int]]]) -> go.Figure:
    """Faults against frame count, one line per algorithm."""
    fig = go.Figure()
    for policy, points in curves.items():
        fig.add_trace(go.Scatter(
            x=[k for k, _ in points],
            y=[faults for _, faults in points],
            mode="lines+markers",
            name=policy.value,
        ))
    fig.update_layout(
        height=320,
        title="Page Faults vs Number of Frames",
        xaxis=dict(title="Frames", dtick=1),
        yaxis=dict(title="Page Faults", rangemode="tozero"),
    )
    return fig


def trace_rows(steps: Sequence[SimulationStep]) -> List[Dict[str, object]]:
    """
    One table row per step: the requested page, each frame's page and the outcome.

    Frame and evicted cells are strings so each column has one type; "-" marks
    a free frame or no eviction.
    """
    rows = []
    for step in steps:
        row: Dict[str, object] = {"step": step.index + 1, "page": step.requested_page}
        for frame in step.frames:
            row[f"Frame {frame.frame_no}"] = str(frame.page_no) if frame.occupied else "-"
        row["status"] = "HIT" if step.hit else "FAULT"
        row["evicted"] = str(step.evicted_page) if step.evicted_page is not None else "-"
        rows.append(row)
    return rows
