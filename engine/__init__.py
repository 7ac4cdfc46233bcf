"""
engine/
-------
Playback, time-travel & recording layer.

    from engine import PlaybackController, SnapshotStore, SortingSession
"""

from engine.scheduler import Timer, ManualScheduler, MonotonicScheduler, AsyncioScheduler
from engine.player    import PlaybackController, PlayerState, Listeners, SPEED_PRESETS
from engine.snapshots import CapturedState, Snapshot, SnapshotStore
from engine.session   import SortingSession
from engine.recorder  import Recorder, RunMetrics, ComparisonResult, compare

__all__ = [
    "Timer",
    "ManualScheduler",
    "MonotonicScheduler",
    "AsyncioScheduler",
    "PlaybackController",
    "PlayerState",
    "Listeners",
    "SPEED_PRESETS",
    "CapturedState",
    "Snapshot",
    "SnapshotStore",
    "SortingSession",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
]
