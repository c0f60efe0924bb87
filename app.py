"""
Page Replacement Visualizer — FIFO, LRU & Optimal

This application provides an interactive simulation and visualization of
virtual memory page replacement:
    - Demand paging into a fixed number of physical frames
    - Page hits, page faults and evictions, step by step
    - FIFO, LRU and Optimal (Belady) replacement
    - Side-by-side comparison and Belady's anomaly

Built with Streamlit for the web interface and Plotly for visualizations.
The simulation itself lives in engine.py; this script only collects the
inputs and renders the results.

Run with:
    streamlit run app.py
"""

# =============================================================================
# IMPORTS
# =============================================================================

import time                                  # For timing/pacing the playback

import streamlit as st                       # Web application framework

from charts import comparison_figure, fault_curve_figure, frame_figure, trace_rows
from engine import (
    ReplacementPolicy,
    compare_policies,
    describe_step,
    fault_curve,
    iter_steps,
    run_simulation,
)
from utils import generate_reference_sequence, parse_reference_string


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_REFERENCE = "7,0,1,2,0,3,0,4,2,3,0,3,2"
DEFAULT_FRAMES = 3
MAX_FRAMES = 10
DEFAULT_POLICY = ReplacementPolicy.FIFO
BELADY_REFERENCE = "1,2,3,4,1,2,5,1,2,3,4,5"

POLICY_LABELS = {
    ReplacementPolicy.FIFO: "FIFO (First-In-First-Out)",
    ReplacementPolicy.LRU: "LRU (Least Recently Used)",
    ReplacementPolicy.OPTIMAL: "OPT (Optimal)",
}


def reset_inputs():
    """Restore every sidebar input to its default (used as a button callback)."""
    st.session_state.frame_count = DEFAULT_FRAMES
    st.session_state.reference_text = DEFAULT_REFERENCE
    st.session_state.policy = DEFAULT_POLICY
    st.session_state.pop("result", None)


def load_reference(text: str):
    """Replace the reference text area (used as a button callback)."""
    st.session_state.reference_text = text
    st.session_state.pop("result", None)


# Configure the Streamlit page
st.set_page_config(page_title="Page Replacement Visualizer", layout="wide")

st.session_state.setdefault("frame_count", DEFAULT_FRAMES)
st.session_state.setdefault("reference_text", DEFAULT_REFERENCE)
st.session_state.setdefault("policy", DEFAULT_POLICY)

# -----------------------------------------------------------------------------
# SIDEBAR NAVIGATION
# -----------------------------------------------------------------------------

page = st.sidebar.radio("Choose View", ["Simulator", "Concepts"])

st.title("Page Replacement Visualizer — FIFO, LRU & Optimal")

# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if page == "Concepts":
    st.header("Operating System Concepts Used in This Project")
    st.markdown(
        """
        ## 📘 Key Concepts

        ### **1. Virtual Memory & Paging**
        - Programs see a large *virtual* address space split into fixed-size **pages**.
        - Physical memory (RAM) is split into **frames** of the same size.
        - Only the pages currently needed are kept in frames.

        ### **2. Page Hit and Page Fault**
        - **Page Hit**: the referenced page is already resident in a frame.
        - **Page Fault**: the page is not resident and must be brought in from disk.
        - When a free frame exists the page simply goes into the lowest free frame.
        - Otherwise a resident page is **evicted** to make room.

        ### **3. Page Replacement Algorithms**

        #### **FIFO (First In First Out)**
        - Evict the page that entered memory earliest.
        - Simple queue, but suffers from **Belady's anomaly**.

        #### **LRU (Least Recently Used)**
        - Evict the page that has not been referenced for the longest time.
        - Exploits temporal locality; needs a timestamp per page.

        #### **OPT (Optimal)**
        - Evict the page whose next use is furthest in the future.
        - Needs knowledge of the future, so it is a yardstick rather than a practical algorithm.

        Ties are broken in favour of the lowest-numbered frame for both LRU and OPT.

        ### **4. Belady's Anomaly**
        - With FIFO, giving a program *more* frames can produce *more* faults.
        - Classic example: `1,2,3,4,1,2,5,1,2,3,4,5` faults 9 times with 3 frames and 10 times with 4.
        - LRU and OPT are stack algorithms and never show the anomaly.

        ### **5. Locality of Reference**
        - Programs tend to reference pages close to the ones they used recently.
        - The workload generator models this: 70% of references stay within ±2 pages of the previous one.

        ### **6. Latency**
        - **Page Hit**: ~10-100 nanoseconds (direct RAM access).
        - **Page Fault**: ~1-10 milliseconds (disk I/O required).
        - Minimizing page faults is crucial for reducing average memory access time.
        """
    )
    st.stop()  # Stop rendering - don't show simulator on Concepts page

# =============================================================================
# SIMULATOR PAGE - Main Interactive Interface
# =============================================================================

# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Simulation Settings")

frame_count = st.sidebar.number_input(
    "Number of frames",
    min_value=1,
    max_value=MAX_FRAMES,
    step=1,
    key="frame_count",
)

policy = st.sidebar.selectbox(
    "Replacement Policy",
    options=list(ReplacementPolicy),
    format_func=lambda p: POLICY_LABELS[p],
    key="policy",
)

st.sidebar.markdown("---")

# -----------------------------------------------------------------------------
# SIDEBAR - Reference String
# -----------------------------------------------------------------------------

st.sidebar.header("Reference String")

access_input = st.sidebar.text_area(
    "Page references (comma or space separated)",
    key="reference_text",
)

uploaded = st.sidebar.file_uploader("...or load from a text file", type=["txt", "csv"])
if uploaded is not None:
    # Undecodable bytes become U+FFFD and are then dropped by the parser
    uploaded_text = uploaded.getvalue().decode("utf-8", errors="replace")
    st.sidebar.button("Use uploaded file", on_click=load_reference, args=(uploaded_text,))

with st.sidebar.expander("Generate a workload"):
    total_pages = st.number_input("Distinct pages", min_value=1, max_value=25, value=8)
    seed = st.number_input("Seed (0 = random, not reproducible)", min_value=0, value=42)
    generated = generate_reference_sequence(int(total_pages), seed=int(seed) or None)
    st.caption(f"{len(generated)} references")
    st.button("Use generated sequence", on_click=load_reference,
              args=(",".join(map(str, generated)),))

st.sidebar.button("Belady's anomaly example", on_click=load_reference, args=(BELADY_REFERENCE,))

st.sidebar.markdown("---")

# Playback speed control for the animated reveal
run_speed = st.sidebar.slider(
    "Playback speed (steps/sec)",
    min_value=0.5,
    max_value=10.0,
    value=2.0,
)

st.sidebar.button("Reset", on_click=reset_inputs)

sequence = parse_reference_string(access_input)

# =============================================================================
# MAIN CONTENT AREA - Two Column Layout
# =============================================================================

col1, col2 = st.columns([1, 2])

# -----------------------------------------------------------------------------
# LEFT COLUMN - Controls and Event Log
# -----------------------------------------------------------------------------

with col1:
    st.subheader("Controls")
    st.write(f"Parsed sequence ({len(sequence)} references): `{' '.join(map(str, sequence)) or '-'}`")

    if st.button("Run Simulation", type="primary"):
        try:
            st.session_state.result = run_simulation(sequence, int(frame_count), policy)
        except ValueError as e:
            st.sidebar.error(str(e))

    animate = st.button("Animate Steps")

    result = st.session_state.get("result")

    # Display event log (most recent 20 events, newest first)
    st.subheader("Event Log")
    if result is None:
        st.write("No simulation run yet")
    else:
        for ev in result.event_log[-20:][::-1]:
            st.write(ev)

# -----------------------------------------------------------------------------
# RIGHT COLUMN - Visualizations
# -----------------------------------------------------------------------------

with col2:
    st.subheader("Physical Frames")
    frames_slot = st.empty()
    status_slot = st.empty()

    if animate:
        # Paced reveal: one step at a time straight from the engine
        try:
            for step in iter_steps(sequence, int(frame_count), policy):
                frames_slot.plotly_chart(frame_figure(step, int(frame_count)), use_container_width=True)
                status_slot.write(" · ".join(describe_step(step)))
                time.sleep(1.0 / run_speed)
        except ValueError as e:
            st.sidebar.error(str(e))
    elif result is not None and result.steps:
        selected = st.slider("Step", min_value=1, max_value=len(result.steps), value=len(result.steps))
        step = result.steps[selected - 1]
        frames_slot.plotly_chart(frame_figure(step, result.frame_count), use_container_width=True)
        status_slot.write(" · ".join(describe_step(step)))
    else:
        frames_slot.plotly_chart(frame_figure(None, int(frame_count)), use_container_width=True)

    if result is not None:
        # ----- Statistics Display -----
        st.subheader("Statistics")
        stats = result.stats
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Algorithm", result.policy.value)
        m2.metric("Page Faults", stats.faults)
        m3.metric("Page Hits", stats.hits)
        m4.metric("Hit Ratio", round(stats.hit_ratio, 4))

        # ----- Step Table -----
        st.subheader("Simulation Steps")
        if result.steps:
            st.dataframe(trace_rows(result.steps), use_container_width=True, hide_index=True)
        else:
            st.write("Reference string is empty, nothing to simulate")

        # ----- Comparison Charts -----
        if result.sequence:
            st.subheader("Algorithm Comparison")
            comparison = compare_policies(result.sequence, result.frame_count)
            st.plotly_chart(comparison_figure(comparison), use_container_width=True)

            curves = {p: fault_curve(result.sequence, p, MAX_FRAMES) for p in ReplacementPolicy}
            st.plotly_chart(fault_curve_figure(curves), use_container_width=True)

# =============================================================================
# FOOTER - Usage Tips and Examples
# =============================================================================

st.markdown("---")
st.markdown(
    "**Usage tips**:\n"
    "- Enter a reference string and click **Run Simulation**; use the step slider to walk through the trace.\n"
    "- **Animate Steps** replays the run one reference at a time at the chosen playback speed.\n"
    "- Tokens that are not non-negative integers are ignored.\n"
    "- Use a non-zero seed to regenerate the same workload later."
)

st.markdown("---")
st.markdown(
    "**Instructor examples**:\n"
    "1) Default string `7,0,1,2,0,3,0,4,2,3,0,3,2` with 3 frames: FIFO 10 faults, LRU 9, OPT 7.\n"
    "2) Belady's anomaly: FIFO on `1,2,3,4,1,2,5,1,2,3,4,5` with 3 and then 4 frames."
)
