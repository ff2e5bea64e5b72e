"""
Playback - time-driven visibility for a finished bolt

Every generated cell becomes a PlaybackElement with a visibility window
[start_time, end_time). One elapsed-time value drives all elements of a
bolt through the same state machine:

    HIDDEN --(t >= start)--> VISIBLE --(t >= end)--> FINISHED

FINISHED is terminal and hidden. Once every element is FINISHED the
driver reports the bolt as done and the caller disposes it as a whole;
individual elements are never removed.

A rendering sink is any object with:
    spawn(position, scale) -> handle
    set_visible(handle, visible)
    dispose()
"""

import enum
from dataclasses import dataclass

from .geometry import Vec3


class ElementState(enum.Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"
    FINISHED = "finished"


@dataclass
class PlaybackElement:
    """One flashing segment: where, how big, and when it is lit."""

    position: Vec3
    size: float
    start_time: float
    end_time: float
    state: ElementState = ElementState.HIDDEN

    @property
    def visible(self):
        return self.state is ElementState.VISIBLE

    @property
    def finished(self):
        return self.state is ElementState.FINISHED

    def state_at(self, elapsed_time):
        if elapsed_time >= self.end_time:
            return ElementState.FINISHED
        if elapsed_time >= self.start_time:
            return ElementState.VISIBLE
        return ElementState.HIDDEN

    def sync_to_time(self, elapsed_time):
        """Update state for elapsed_time. Returns True once finished."""
        self.state = self.state_at(elapsed_time)
        return self.state is ElementState.FINISHED


class PlaybackDriver:
    """Plays back one bolt's elements against a monotonically rising clock."""

    def __init__(self, elements, sink=None):
        """
        Args:
            elements: PlaybackElements in slice order
            sink: Optional rendering sink (spawn / set_visible / dispose)
        """
        self.elements = list(elements)
        self.elapsed_time = 0.0
        self.finished = not self.elements
        self.sink = sink
        self._handles = []
        self._disposed = False
        if sink is not None:
            self._handles = [sink.spawn(e.position, e.size) for e in self.elements]
            for handle in self._handles:
                sink.set_visible(handle, False)

    def tick(self, elapsed_time):
        """Sync every element to elapsed_time.

        Returns:
            True when every element has finished (bolt can be disposed)
        """
        all_finished = True
        for i, element in enumerate(self.elements):
            was_visible = element.visible
            all_finished &= element.sync_to_time(elapsed_time)
            if self.sink is not None and element.visible != was_visible:
                self.sink.set_visible(self._handles[i], element.visible)

        self.finished = all_finished
        if all_finished and self.sink is not None and not self._disposed:
            self.sink.dispose()
            self._disposed = True
        return all_finished

    def advance(self, dt):
        """Per-frame update: sync at the current time, then move the clock on.

        Args:
            dt: Seconds since the previous frame (must be >= 0)
        """
        if dt < 0:
            raise ValueError(f"Playback clock cannot run backwards (dt={dt})")
        done = self.tick(self.elapsed_time)
        self.elapsed_time += dt
        return done

    def visible_elements(self):
        return [e for e in self.elements if e.visible]

    @property
    def duration(self):
        """Time at which the last element finishes."""
        if not self.elements:
            return 0.0
        return max(e.end_time for e in self.elements)

    @property
    def stats(self):
        counts = {state: 0 for state in ElementState}
        for element in self.elements:
            counts[element.state] += 1
        return {
            "elapsed": self.elapsed_time,
            "hidden": counts[ElementState.HIDDEN],
            "visible": counts[ElementState.VISIBLE],
            "finished": counts[ElementState.FINISHED],
        }
