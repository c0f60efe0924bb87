"""Tests for the Plotly figures and step tables."""

from charts import comparison_figure, fault_curve_figure, frame_figure, trace_rows
from engine import ReplacementPolicy, compare_policies, fault_curve, simulate
from utils import page_color

DEFAULT_REFERENCE = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2]


class TestFrameFigure:
    """Verify the frame pool bar chart."""

    def test_labels_after_step(self) -> None:
        """Each bar is labelled with its frame and page."""
        step = simulate(DEFAULT_REFERENCE, 3, "FIFO")[1]
        bar = frame_figure(step, 3).data[0]
        assert list(bar.text) == ["F0: P7", "F1: P0", "F2: Free"]
        assert list(bar.marker.color) == [page_color(7), page_color(0), page_color(None)]

    def test_just_loaded_frame_outlined(self) -> None:
        """Only the frame loaded by the step gets an outline."""
        step = simulate(DEFAULT_REFERENCE, 3, "FIFO")[3]
        bar = frame_figure(step, 3).data[0]
        assert list(bar.marker.line.width) == [4, 0, 0]

    def test_title_reports_outcome(self) -> None:
        """The title names the step, page and outcome."""
        trace = simulate(DEFAULT_REFERENCE, 3, "FIFO")
        assert frame_figure(trace[0], 3).layout.title.text == "Step 1: page 7 -> FAULT"
        assert frame_figure(trace[4], 3).layout.title.text == "Step 5: page 0 -> HIT"

    def test_no_step_shows_free_pool(self) -> None:
        """Before any run every frame is free."""
        bar = frame_figure(None, 2).data[0]
        assert list(bar.text) == ["F0: Free", "F1: Free"]


class TestComparisonFigure:
    """Verify the policy comparison chart."""

    def test_bars_per_policy(self) -> None:
        """One bar per policy with its fault count."""
        fig = comparison_figure(compare_policies(DEFAULT_REFERENCE, 3))
        assert list(fig.data[0].x) == ["FIFO", "LRU", "OPT"]
        assert list(fig.data[0].y) == [10, 9, 7]
        assert fig.layout.title.text == "Algorithm Performance Comparison"


class TestFaultCurveFigure:
    """Verify the faults-vs-frames chart."""

    def test_one_line_per_policy(self) -> None:
        """Each policy gets a named line over the frame counts."""
        curves = {p: fault_curve(DEFAULT_REFERENCE, p, 4) for p in ReplacementPolicy}
        fig = fault_curve_figure(curves)
        assert [trace.name for trace in fig.data] == ["FIFO", "LRU", "OPT"]
        assert list(fig.data[0].x) == [1, 2, 3, 4]
        assert fig.data[0].y[2] == 10


class TestTraceRows:
    """Verify the step table rows."""

    def test_rows(self) -> None:
        """Rows show the request, each frame and the outcome."""
        rows = trace_rows(simulate(DEFAULT_REFERENCE, 3, "FIFO"))
        assert len(rows) == len(DEFAULT_REFERENCE)
        assert rows[0] == {
            "step": 1, "page": 7,
            "Frame 0": "7", "Frame 1": "-", "Frame 2": "-",
            "status": "FAULT", "evicted": "-",
        }
        assert rows[3]["evicted"] == "7"
        assert rows[4]["status"] == "HIT"

    def test_empty_trace(self) -> None:
        """No steps, no rows."""
        assert trace_rows(()) == []
