"""
Page Replacement Engine — FIFO, LRU and Optimal

This module holds the simulation core of the visualizer. It replays a
sequence of page references against a fixed-size pool of physical frames
and records, for every reference, whether it hit or faulted and which page
(if any) was evicted to make room.

Everything here is pure and synchronous: a run is a function of
(sequence, frame count, policy) and every value it returns is immutable.
The Streamlit front end in app.py only consumes these results.
"""

# =============================================================================
# IMPORTS
# =============================================================================

from bisect import bisect_right
from collections import deque                # deque for the FIFO load queue
from dataclasses import dataclass            # For clean data class definitions
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


# =============================================================================
# ERRORS
# =============================================================================

class ConfigurationError(ValueError):
    """Raised when a simulation is configured with an invalid frame count or policy."""


# =============================================================================
# SIMULATION ENGINE - Core Data Structures
# =============================================================================

@dataclass(frozen=True)
class Frame:
    """
    Represents a physical memory frame in RAM.

    A frame is either empty or holds exactly one resident page. The
    `occupied` flag is the tag; `page_no` is only meaningful when it is set.

    Attributes:
        frame_no (int): The frame's index in physical memory
        occupied (bool): True if a page is currently loaded here
        page_no (Optional[int]): The resident page, None if the frame is free
        just_loaded (bool): True if the page was placed here by this step
    """
    frame_no: int
    occupied: bool = False
    page_no: Optional[int] = None
    just_loaded: bool = False

    def __post_init__(self):
        if self.frame_no < 0:
            raise ValueError("frame_no must be non-negative")
        if self.occupied != (self.page_no is not None):
            raise ValueError("an occupied frame must hold a page and a free frame must not")
        if self.just_loaded and not self.occupied:
            raise ValueError("a free frame cannot be just loaded")

    @classmethod
    def empty(cls, frame_no: int) -> "Frame":
        return cls(frame_no)

    @classmethod
    def holding(cls, frame_no: int, page_no: int, just_loaded: bool = False) -> "Frame":
        return cls(frame_no, occupied=True, page_no=page_no, just_loaded=just_loaded)


@dataclass(frozen=True)
class SimulationStep:
    """
    One processed reference of a simulation run.

    Attributes:
        index (int): Position of the reference in the input sequence
        requested_page (int): The page that was referenced
        frames (Tuple[Frame, ...]): Snapshot of the frame pool after the step
        hit (bool): True if the page was already resident
        frame_no (int): Frame holding the requested page after the step
        evicted_page (Optional[int]): Page removed to make room, if any
        evicted_frame_no (Optional[int]): Frame the evicted page was removed from
    """
    index: int
    requested_page: int
    frames: Tuple[Frame, ...]
    hit: bool
    frame_no: int
    evicted_page: Optional[int] = None
    evicted_frame_no: Optional[int] = None

    @property
    def fault(self) -> bool:
        return not self.hit

    @property
    def resident_pages(self) -> List[Optional[int]]:
        """Page per frame after this step, None for free frames."""
        return [f.page_no for f in self.frames]


@dataclass(frozen=True)
class Stats:
    """
    Summary counters for a finished run.

    hit_ratio is hits / total_references and is 0.0 for an empty run.
    """
    total_references: int
    faults: int
    hits: int
    hit_ratio: float

    @property
    def fault_rate(self) -> float:
        if self.total_references == 0:
            return 0.0
        return self.faults / self.total_references

    def as_dict(self) -> Dict[str, float]:
        return {
            "total_refs": self.total_references,
            "faults": self.faults,
            "hits": self.hits,
            "hit_ratio": self.hit_ratio,
            "fault_rate": self.fault_rate,
        }


class ReplacementPolicy(str, Enum):
    """
    Enumeration of available page replacement algorithms.

    FIFO:    First-In-First-Out - replaces the oldest page in memory
    LRU:     Least Recently Used - replaces the page not used for longest time
    OPTIMAL: Belady's algorithm - replaces the page used furthest in the future
    """
    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "OPT"

    @classmethod
    def parse(cls, value) -> "ReplacementPolicy":
        """
        Resolve a selector value ("FIFO", "lru", "OPT", "OPTIMAL", or a member).

        Raises:
            ConfigurationError: If the value names no known policy
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        if key == "OPTIMAL":
            key = cls.OPTIMAL.value
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationError(f"Unknown replacement policy: {value!r}") from None


# =============================================================================
# EVICTION POLICIES
# =============================================================================

class EvictionPolicy:
    """
    Base class for page replacement strategies.

    The simulator calls `reset` once at the start of a run and then keeps
    the policy's bookkeeping current through `on_load`, `on_hit` and
    `on_evict`. `choose_victim` is only asked when every frame is occupied.
    Custom strategies may leave `kind` unset.
    """

    kind: Optional[ReplacementPolicy] = None

    def reset(self, sequence: Sequence[int]):
        """Forget all bookkeeping from a previous run."""

    def on_load(self, page_no: int, frame_no: int, position: int):
        """A page has been placed into a frame at the given position."""

    def on_hit(self, page_no: int, position: int):
        """A resident page has been referenced again."""

    def on_evict(self, page_no: int, frame_no: int):
        """A resident page has been removed from its frame."""

    def choose_victim(self, frames: Sequence[Frame], requested_page: int, position: int) -> int:
        """
        Pick the frame whose page will be evicted.

        Args:
            frames (Sequence[Frame]): The current, fully occupied frame pool
            requested_page (int): The page that faulted
            position (int): Index of the faulting reference in the sequence

        Returns:
            int: Frame number of the victim
        """
        raise NotImplementedError


class FIFOPolicy(EvictionPolicy):
    """Evict the page that has been resident the longest."""

    kind = ReplacementPolicy.FIFO

    def __init__(self):
        # Resident pages in load order (oldest at the left)
        self.queue: deque = deque()

    def reset(self, sequence: Sequence[int]):
        self.queue = deque()

    def on_load(self, page_no: int, frame_no: int, position: int):
        self.queue.append(page_no)

    def on_evict(self, page_no: int, frame_no: int):
        assert self.queue and self.queue[0] == page_no, "FIFO evicted a page out of load order"
        self.queue.popleft()

    def choose_victim(self, frames: Sequence[Frame], requested_page: int, position: int) -> int:
        oldest = self.queue[0]
        for f in frames:
            if f.occupied and f.page_no == oldest:
                return f.frame_no
        raise AssertionError(f"FIFO queue head {oldest} is not resident")


class LRUPolicy(EvictionPolicy):
    """Evict the page whose last reference is the oldest."""

    kind = ReplacementPolicy.LRU

    def __init__(self):
        # page_no -> position of its most recent reference
        self.last_used: Dict[int, int] = {}

    def reset(self, sequence: Sequence[int]):
        self.last_used = {}

    def on_load(self, page_no: int, frame_no: int, position: int):
        self.last_used[page_no] = position

    def on_hit(self, page_no: int, position: int):
        self.last_used[page_no] = position

    def on_evict(self, page_no: int, frame_no: int):
        del self.last_used[page_no]

    def choose_victim(self, frames: Sequence[Frame], requested_page: int, position: int) -> int:
        # Strict comparison: ties go to the lowest frame number
        min_time = float('inf')
        victim_frame_no = None

        for f in frames:
            if f.occupied and self.last_used[f.page_no] < min_time:
                min_time = self.last_used[f.page_no]
                victim_frame_no = f.frame_no

        assert victim_frame_no is not None, "LRU found no resident page to evict"
        return victim_frame_no


class OptimalPolicy(EvictionPolicy):
    """
    Evict the page whose next reference lies furthest in the future.

    Needs the whole reference sequence up front; it only ever reads the
    part of it after the current position. `reset` indexes every page's
    positions once so each lookahead is a binary search.
    """

    kind = ReplacementPolicy.OPTIMAL

    def __init__(self):
        self.sequence: Tuple[int, ...] = ()
        # page_no -> ascending positions at which it is referenced
        self.occurrences: Dict[int, List[int]] = {}

    def reset(self, sequence: Sequence[int]):
        self.sequence = tuple(sequence)
        self.occurrences = {}
        for idx, page_no in enumerate(self.sequence):
            self.occurrences.setdefault(page_no, []).append(idx)

    def next_use(self, page_no: int, position: int) -> float:
        """Index of the next reference to page_no after position, inf if none."""
        positions = self.occurrences.get(page_no, [])
        i = bisect_right(positions, position)
        if i < len(positions):
            return positions[i]
        return float('inf')

    def choose_victim(self, frames: Sequence[Frame], requested_page: int, position: int) -> int:
        # Strict comparison: ties (including several never-used pages) go to
        # the lowest frame number
        max_next_use = -1
        victim_frame_no = None

        for f in frames:
            if not f.occupied:
                continue
            next_ref = self.next_use(f.page_no, position)
            if next_ref > max_next_use:
                max_next_use = next_ref
                victim_frame_no = f.frame_no

        assert victim_frame_no is not None, "OPT found no resident page to evict"
        return victim_frame_no


POLICY_CLASSES = {
    ReplacementPolicy.FIFO: FIFOPolicy,
    ReplacementPolicy.LRU: LRUPolicy,
    ReplacementPolicy.OPTIMAL: OptimalPolicy,
}


def make_policy(policy) -> EvictionPolicy:
    """
    Build a fresh eviction policy.

    Args:
        policy: A ReplacementPolicy, its value ("FIFO", "LRU", "OPT"),
            or an EvictionPolicy instance (returned unchanged)

    Raises:
        ConfigurationError: If the selector names no known policy
    """
    if isinstance(policy, EvictionPolicy):
        return policy
    return POLICY_CLASSES[ReplacementPolicy.parse(policy)]()


# =============================================================================
# SIMULATOR
# =============================================================================

def _check_frame_count(frame_count) -> int:
    if isinstance(frame_count, bool) or not isinstance(frame_count, int):
        raise ConfigurationError(f"Frame count must be an integer, got {frame_count!r}")
    if frame_count < 1:
        raise ConfigurationError(f"Frame count must be at least 1, got {frame_count}")
    return frame_count


def _run_steps(sequence: Tuple[int, ...], frame_count: int,
               policy: EvictionPolicy) -> Iterator[SimulationStep]:
    frames: List[Frame] = [Frame.empty(i) for i in range(frame_count)]
    # page_no -> frame_no for every resident page
    resident: Dict[int, int] = {}
    policy.reset(sequence)

    for position, page_no in enumerate(sequence):
        evicted_page = None
        evicted_frame_no = None

        # ----- PAGE HIT -----
        if page_no in resident:
            frame_no = resident[page_no]
            policy.on_hit(page_no, position)
            snapshot = tuple(Frame.holding(f.frame_no, f.page_no) if f.just_loaded else f
                             for f in frames)
            frames = list(snapshot)
            yield SimulationStep(position, page_no, snapshot, True, frame_no)
            continue

        # ----- PAGE FAULT -----
        free_frame = next((f for f in frames if not f.occupied), None)

        if free_frame is not None:
            # Free frame available - fill the lowest-numbered one
            frame_no = free_frame.frame_no
        else:
            assert resident, "page fault with no free frame and no resident page"
            frame_no = policy.choose_victim(tuple(frames), page_no, position)
            assert isinstance(frame_no, int) and 0 <= frame_no < len(frames), \
                f"victim frame {frame_no!r} is outside the pool"
            victim = frames[frame_no]
            assert victim.occupied, f"victim frame {frame_no} is empty"
            evicted_page = victim.page_no
            evicted_frame_no = frame_no
            policy.on_evict(evicted_page, frame_no)
            del resident[evicted_page]

        resident[page_no] = frame_no
        policy.on_load(page_no, frame_no, position)

        snapshot = tuple(
            Frame.holding(i, page_no, just_loaded=True) if i == frame_no
            else (Frame.holding(i, f.page_no) if f.just_loaded else f)
            for i, f in enumerate(frames)
        )
        assert snapshot[frame_no].page_no == page_no, f"page {page_no} was not placed in frame {frame_no}"
        assert len(resident) == sum(1 for f in snapshot if f.occupied), "page resident in two frames"
        frames = list(snapshot)
        yield SimulationStep(position, page_no, snapshot, False, frame_no,
                             evicted_page, evicted_frame_no)


def iter_steps(sequence: Iterable[int], frame_count: int, policy) -> Iterator[SimulationStep]:
    """
    Lazily replay a reference sequence, one SimulationStep at a time.

    The frame count and policy are validated before this returns, so a bad
    configuration never yields a partial run. Each step is computed only
    when the consumer asks for it, so the caller may pace or stop the
    iteration at any point. Calling iter_steps again starts a fresh run.

    Args:
        sequence (Iterable[int]): Page numbers to reference, in order
        frame_count (int): Number of physical frames (at least 1)
        policy: ReplacementPolicy, its value, or an EvictionPolicy instance

    Raises:
        ConfigurationError: If frame_count or policy is invalid
    """
    frame_count = _check_frame_count(frame_count)
    eviction_policy = make_policy(policy)
    return _run_steps(tuple(sequence), frame_count, eviction_policy)


def simulate(sequence: Iterable[int], frame_count: int, policy) -> Tuple[SimulationStep, ...]:
    """
    Replay a reference sequence and return the complete trace.

    Returns:
        Tuple[SimulationStep, ...]: One step per reference, in order
    """
    return tuple(iter_steps(sequence, frame_count, policy))


# =============================================================================
# STATISTICS
# =============================================================================

def aggregate(trace: Iterable[SimulationStep]) -> Stats:
    """
    Reduce a trace to summary counters.

    Returns:
        Stats: hits, faults, total references and hit ratio
    """
    total_refs = 0
    hits = 0
    for step in trace:
        total_refs += 1
        if step.hit:
            hits += 1

    hit_ratio = (hits / total_refs) if total_refs > 0 else 0.0
    return Stats(total_refs, total_refs - hits, hits, hit_ratio)


# =============================================================================
# RUN HELPERS
# =============================================================================

@dataclass(frozen=True)
class SimulationResult:
    """
    Everything a renderer needs about one run.

    Attributes:
        policy (Optional[ReplacementPolicy]): Algorithm used, None for a custom strategy without a kind
        frame_count (int): Number of physical frames
        sequence (Tuple[int, ...]): The reference sequence that was replayed
        steps (Tuple[SimulationStep, ...]): The trace
        stats (Stats): Summary counters for the trace
        event_log (Tuple[str, ...]): Human readable log of every step
    """
    policy: Optional[ReplacementPolicy]
    frame_count: int
    sequence: Tuple[int, ...]
    steps: Tuple[SimulationStep, ...]
    stats: Stats
    event_log: Tuple[str, ...]


def describe_step(step: SimulationStep) -> List[str]:
    """Event log lines for one step."""
    page_no = step.requested_page
    if step.hit:
        return [f"Hit: Page {page_no} in Frame {step.frame_no}"]

    events = [f"Fault: Page {page_no} not in memory"]
    if step.evicted_page is not None:
        events.append(f"Evicting: Page {step.evicted_page} from Frame {step.evicted_frame_no}")
        events.append(f"Loaded: Page {page_no} -> Frame {step.frame_no} (replaced)")
    else:
        events.append(f"Loaded: Page {page_no} -> Frame {step.frame_no}")
    return events


def run_simulation(sequence: Iterable[int], frame_count: int, policy) -> SimulationResult:
    """Simulate a sequence and bundle the trace, stats and event log."""
    kind = make_policy(policy).kind
    sequence = tuple(sequence)
    steps = simulate(sequence, frame_count, policy)

    event_log: List[str] = []
    for step in steps:
        event_log.extend(describe_step(step))

    return SimulationResult(kind, frame_count, sequence, steps, aggregate(steps), tuple(event_log))


def compare_policies(sequence: Iterable[int], frame_count: int,
                     policies: Optional[Iterable] = None) -> Dict[ReplacementPolicy, Stats]:
    """
    Run several policies over the same input.

    Args:
        sequence (Iterable[int]): Page numbers to reference
        frame_count (int): Number of physical frames
        policies: Policies to compare, all of them by default

    Returns:
        Dict[ReplacementPolicy, Stats]: Stats per policy, in the order given
    """
    frame_count = _check_frame_count(frame_count)
    sequence = tuple(sequence)
    kinds = [ReplacementPolicy.parse(p) for p in (policies or list(ReplacementPolicy))]
    return {kind: aggregate(iter_steps(sequence, frame_count, kind)) for kind in kinds}


def fault_curve(sequence: Iterable[int], policy, max_frames: int) -> List[Tuple[int, int]]:
    """
    Page faults for every frame count from 1 to max_frames.

    For FIFO the curve is not always monotone (Belady's anomaly).

    Returns:
        List[Tuple[int, int]]: (frame_count, faults) pairs
    """
    max_frames = _check_frame_count(max_frames)
    kind = ReplacementPolicy.parse(policy)
    sequence = tuple(sequence)
    return [(k, aggregate(iter_steps(sequence, k, kind)).faults) for k in range(1, max_frames + 1)]
