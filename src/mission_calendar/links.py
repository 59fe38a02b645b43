"""Layer 2: dependency links between events and how they are drawn.

Edges are directed: target.linked_event_ids contains source.id. Rendering
uses the visibility set of a TimelineLayout: a visible target gets a full
connector to each visible source and a ghost stub for every other source,
including ids that no longer exist. Hidden targets draw nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from mission_calendar.commands import LinkCreate, LinkRemove
from mission_calendar.timeline import TimelineLayout
from mission_calendar.types import CalendarEvent, InvalidOperationError

FAN_STEP = 6
BACKWARDS_DROP = 80
BACKWARDS_HANDLE = 50
MAX_CURVATURE = 250
CURVATURE_RATIO = 0.6
CONTROL_DROP = 60
GHOST_STUB_LENGTH = 40

Point = tuple[float, float]


def link_key(target_id: str, source_id: str) -> str:
    return f"{target_id}-{source_id}"


def _fmt(p: Point) -> str:
    return f"{p[0]:g} {p[1]:g}"


def _index(events: Iterable[CalendarEvent]) -> dict[str, CalendarEvent]:
    if isinstance(events, Mapping):
        return dict(events)
    return {e.id: e for e in events}


def create_link(
    events: Iterable[CalendarEvent] | Mapping[str, CalendarEvent],
    source_id: str,
    target_id: str,
) -> LinkCreate:
    """Validate a new edge source -> target and return its command.

    Raises InvalidOperationError for a self-link, an unknown target, or a
    duplicate edge. The source may be unknown (dangling sources are allowed).
    """
    by_id = _index(events)
    if source_id == target_id:
        raise InvalidOperationError("link", target_id, "an event cannot depend on itself")
    target = by_id.get(target_id)
    if target is None:
        raise InvalidOperationError("link", target_id, "unknown target event")
    if target.depends_on(source_id):
        raise InvalidOperationError("link", target_id, f"already linked to {source_id!r}")
    return LinkCreate(target_id=target_id, source_id=source_id)


def remove_link(
    events: Iterable[CalendarEvent] | Mapping[str, CalendarEvent],
    target_id: str,
    source_id: str,
) -> LinkRemove:
    """Validate removal of source from target's links and return its command."""
    target = _index(events).get(target_id)
    if target is None:
        raise InvalidOperationError("unlink", target_id, "unknown target event")
    if not target.depends_on(source_id):
        raise InvalidOperationError("unlink", target_id, f"not linked to {source_id!r}")
    return LinkRemove(target_id=target_id, source_id=source_id)


def fan_offset(index: int) -> float:
    """Alternating spread for parallel edges: 0, -6, +12, -18, ..."""
    return (1 if index % 2 == 0 else -1) * index * FAN_STEP


def connector_controls(
    x1: float, y1: float, x2: float, y2: float, index: int = 0
) -> tuple[Point, Point]:
    """Bezier control points for an edge from (x1, y1) to (x2, y2).

    Backwards edges (x2 < x1) loop below both cards with short handles.
    Forward edges are a horizontal S-curve whose handles grow with the gap.
    """
    width = abs(x2 - x1)
    fan = fan_offset(index)

    if x2 < x1:
        return (
            (x1 + BACKWARDS_HANDLE, y1 + BACKWARDS_DROP + fan),
            (x2 - BACKWARDS_HANDLE, y2 + BACKWARDS_DROP + fan),
        )

    curvature = min(width * CURVATURE_RATIO, MAX_CURVATURE) + abs(fan)
    return (x1 + curvature, y1), (x2 - curvature, y2)


@dataclass(frozen=True)
class Connector:
    """Full edge from the source's trailing edge to the target's leading edge."""

    target_id: str
    source_id: str
    index: int
    start: Point
    control1: Point
    control2: Point
    end: Point
    backwards: bool

    @property
    def key(self) -> str:
        return link_key(self.target_id, self.source_id)

    @property
    def midpoint(self) -> Point:
        """Where the removal control sits."""
        (x1, y1), (x2, y2) = self.start, self.end
        if self.backwards:
            return (x1 + x2) / 2, max(y1, y2) + CONTROL_DROP
        return (x1 + x2) / 2, (y1 + y2) / 2

    def svg_path(self) -> str:
        return (
            f"M {_fmt(self.start)} C {_fmt(self.control1)}, "
            f"{_fmt(self.control2)}, {_fmt(self.end)}"
        )


@dataclass(frozen=True)
class GhostStub:
    """Dashed stub ending at the target's leading edge; the source is off-board."""

    target_id: str
    source_id: str
    index: int
    start: Point
    end: Point

    @property
    def key(self) -> str:
        return link_key(self.target_id, self.source_id)

    @property
    def midpoint(self) -> Point:
        (x1, y1), (x2, y2) = self.start, self.end
        return (x1 + x2) / 2, (y1 + y2) / 2

    def svg_path(self) -> str:
        return f"M {_fmt(self.start)} L {_fmt(self.end)}"


@dataclass(frozen=True)
class LinkRender:
    connectors: tuple[Connector, ...]
    ghosts: tuple[GhostStub, ...]

    def edges(self) -> list[Connector | GhostStub]:
        return [*self.connectors, *self.ghosts]


def render_links(
    events: Iterable[CalendarEvent],
    layout: TimelineLayout,
    dragging_id: str | None = None,
) -> LinkRender:
    """Decide how each edge of each visible target is drawn.

    Edges touching the event being dragged are left out until it lands.
    """
    connectors: list[Connector] = []
    ghosts: list[GhostStub] = []

    for event in events:
        target = layout.coordinate(event.id)
        if target is None or not event.linked_event_ids:
            continue

        for idx, source_id in enumerate(event.linked_event_ids):
            if dragging_id is not None and dragging_id in (event.id, source_id):
                continue

            source = layout.coordinate(source_id)
            if source is None:
                ghosts.append(
                    GhostStub(
                        target_id=event.id,
                        source_id=source_id,
                        index=idx,
                        start=(target.x_start - GHOST_STUB_LENGTH, target.y),
                        end=(target.x_start, target.y),
                    )
                )
                continue

            x1, y1 = source.x_end, source.y
            x2, y2 = target.x_start, target.y
            control1, control2 = connector_controls(x1, y1, x2, y2, idx)
            connectors.append(
                Connector(
                    target_id=event.id,
                    source_id=source_id,
                    index=idx,
                    start=(x1, y1),
                    control1=control1,
                    control2=control2,
                    end=(x2, y2),
                    backwards=x2 < x1,
                )
            )

    return LinkRender(connectors=tuple(connectors), ghosts=tuple(ghosts))


def removal_controls(
    render: LinkRender,
    hovered_key: str | None = None,
    unlinking: bool = False,
) -> list[tuple[str, Point]]:
    """(link key, position) of each removal control to show.

    All edges show one in manage-links mode; otherwise only the hovered edge.
    """
    return [
        (edge.key, edge.midpoint)
        for edge in render.edges()
        if unlinking or edge.key == hovered_key
    ]


def find_cycle(events: Iterable[CalendarEvent]) -> list[str] | None:
    """Return one dependency cycle as [a, b, ..., a], or None.

    Cycles are representable; this is a diagnostic, not a guard.
    Dangling ids are ignored.
    """
    by_id = _index(events)
    state: dict[str, int] = {}  # 1 = on stack, 2 = done

    for root in by_id:
        if root in state:
            continue
        path: list[str] = [root]
        stack = [iter(by_id[root].linked_event_ids)]
        state[root] = 1
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                state[path.pop()] = 2
                stack.pop()
                continue
            if nxt not in by_id:
                continue
            if state.get(nxt) == 1:
                return path[path.index(nxt):] + [nxt]
            if nxt not in state:
                state[nxt] = 1
                path.append(nxt)
                stack.append(iter(by_id[nxt].linked_event_ids))
    return None
