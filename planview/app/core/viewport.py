"""
Pan and zoom state of the drawing viewport.

The viewport is a pure reducer: ``reduce_viewport(state, event)`` returns the
next ViewportState for a pointer, wheel, resize or image event. Screen
coordinates are viewport pixels; world coordinates are primary image pixels,
related by ``screen = pan + world * zoom / 100``.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)

Size = Tuple[float, float]

PRIMARY = "primary"
REFERENCE = "reference"


@dataclass(frozen=True)
class ZoomLimits:
    minimum: int = 20
    maximum: int = 100
    step: int = 5

    def clamp(self, value: float) -> int:
        return int(max(self.minimum, min(self.maximum, int(round(value)))))


DEFAULT_LIMITS = ZoomLimits()


@dataclass(frozen=True)
class ViewportState:
    """
    Snapshot of the viewport.

    Attributes
    ----------
    pan : Tuple[float, float]
        Screen offset of the image's top-left corner.
    zoom : int
        Zoom percentage.
    dragging : bool
        Whether a drag is in progress.
    drag_anchor : Tuple[float, float]
        Pointer position minus pan at the start of the drag.
    container_size : Size
        Viewport widget size, (0, 0) until known.
    image : Optional[str]
        Identity of the primary image.
    reference : Optional[str]
        Identity of the reference image named by the primary transform.
    primary_size : Size
        Natural size of the primary image, (0, 0) until loaded.
    reference_size : Size
        Natural size of the reference image, (0, 0) until loaded.
    user_moved : bool
        Set once the user pans or wheel-zooms after the last image change.
    centered : bool
        Set once auto-centering has been applied for the current image.
    """

    pan: Tuple[float, float] = (0.0, 0.0)
    zoom: int = 35
    dragging: bool = False
    drag_anchor: Tuple[float, float] = (0.0, 0.0)
    container_size: Size = (0.0, 0.0)
    image: Optional[str] = None
    reference: Optional[str] = None
    primary_size: Size = (0.0, 0.0)
    reference_size: Size = (0.0, 0.0)
    user_moved: bool = False
    centered: bool = False

    @property
    def scale(self) -> float:
        return self.zoom / 100.0

    def to_world(self, x: float, y: float) -> Tuple[float, float]:
        return (x - self.pan[0]) / self.scale, (y - self.pan[1]) / self.scale

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return self.pan[0] + x * self.scale, self.pan[1] + y * self.scale


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    """Ends a drag; also sent when the pointer leaves the viewport."""


@dataclass(frozen=True)
class Wheel:
    """Wheel input at a pointer position; positive delta zooms in."""

    x: float
    y: float
    delta: float


@dataclass(frozen=True)
class SetZoom:
    value: float


@dataclass(frozen=True)
class ContainerResized:
    width: float
    height: float


@dataclass(frozen=True)
class ImageChanged:
    image: Optional[str]
    reference: Optional[str] = None


@dataclass(frozen=True)
class ImageDimensionsKnown:
    which: str
    width: float
    height: float


ViewportEvent = Union[
    PointerDown,
    PointerMove,
    PointerUp,
    Wheel,
    SetZoom,
    ContainerResized,
    ImageChanged,
    ImageDimensionsKnown,
]


def _known(size: Size) -> bool:
    return size[0] > 0 and size[1] > 0


def _size(width: float, height: float) -> Size:
    if width > 0 and height > 0:
        return float(width), float(height)
    return 0.0, 0.0


def centered_pan(state: ViewportState) -> Tuple[float, float]:
    """Return the pan that centers the primary image in the container."""
    cw, ch = state.container_size
    iw, ih = state.primary_size
    return (cw - iw * state.scale) / 2.0, (ch - ih * state.scale) / 2.0


def _maybe_center(state: ViewportState) -> ViewportState:
    if state.centered or state.user_moved:
        return state
    if not (_known(state.container_size) and _known(state.primary_size)):
        return state
    pan = centered_pan(state)
    logger.debug("Centering %r at pan=%s zoom=%d", state.image, pan, state.zoom)
    return replace(state, pan=pan, centered=True)


def zoom_at(state: ViewportState, x: float, y: float, next_zoom: int) -> ViewportState:
    """
    Change zoom keeping the world point under (x, y) fixed on screen.
    """
    if next_zoom == state.zoom:
        return state
    world_x, world_y = state.to_world(x, y)
    next_scale = next_zoom / 100.0
    return replace(
        state,
        zoom=next_zoom,
        pan=(x - world_x * next_scale, y - world_y * next_scale),
    )


def reduce_viewport(
    state: ViewportState, event: ViewportEvent, limits: ZoomLimits = DEFAULT_LIMITS
) -> ViewportState:
    """
    Apply one event to the viewport.

    Parameters
    ----------
    state : ViewportState
        The current state.
    event : ViewportEvent
        The event to apply.
    limits : ZoomLimits, optional
        Zoom range and wheel step.

    Returns
    -------
    ViewportState
        The next state (the same object when the event is a no-op).
    """
    if isinstance(event, PointerDown):
        return replace(
            state,
            dragging=True,
            drag_anchor=(event.x - state.pan[0], event.y - state.pan[1]),
        )
    if isinstance(event, PointerMove):
        if not state.dragging:
            return state
        return replace(
            state,
            pan=(event.x - state.drag_anchor[0], event.y - state.drag_anchor[1]),
            user_moved=True,
        )
    if isinstance(event, PointerUp):
        return replace(state, dragging=False) if state.dragging else state
    if isinstance(event, Wheel):
        if event.delta == 0:
            return state
        step = limits.step if event.delta > 0 else -limits.step
        next_state = zoom_at(state, event.x, event.y, limits.clamp(state.zoom + step))
        if next_state is state:
            return state
        return replace(next_state, user_moved=True)
    if isinstance(event, SetZoom):
        zoom = limits.clamp(event.value)
        if zoom == state.zoom:
            return state
        return _maybe_center(replace(state, zoom=zoom))
    if isinstance(event, ContainerResized):
        return _maybe_center(
            replace(state, container_size=_size(event.width, event.height))
        )
    if isinstance(event, ImageChanged):
        next_state = state
        if event.reference != state.reference:
            next_state = replace(
                next_state, reference=event.reference, reference_size=(0.0, 0.0)
            )
        if event.image != state.image:
            next_state = replace(
                next_state,
                image=event.image,
                primary_size=(0.0, 0.0),
                user_moved=False,
                centered=False,
                dragging=False,
            )
        return next_state
    if isinstance(event, ImageDimensionsKnown):
        size = _size(event.width, event.height)
        if event.which == PRIMARY:
            return _maybe_center(replace(state, primary_size=size))
        if event.which == REFERENCE:
            return replace(state, reference_size=size)
        logger.warning("Ignoring dimensions for unknown image slot %r", event.which)
        return state
    raise TypeError(f"Unsupported viewport event: {event!r}")


class ViewportController:
    """
    Holder of the current ViewportState.

    Attributes
    ----------
    state : ViewportState
        The current state.
    limits : ZoomLimits
        Zoom range and wheel step.
    """

    state: ViewportState
    limits: ZoomLimits

    def __init__(self, zoom: int = 35, limits: ZoomLimits = DEFAULT_LIMITS) -> None:
        self.limits = limits
        self.state = ViewportState(zoom=limits.clamp(zoom))

    def dispatch(self, event: ViewportEvent) -> bool:
        """Apply an event; return True if the state changed."""
        previous = self.state
        self.state = reduce_viewport(previous, event, self.limits)
        return self.state != previous
