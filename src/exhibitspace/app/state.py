"""
Navigation State (Store)
========================
Owns everything the viewer "is doing": which platform it stands on, the
transport in flight, a deferred look-at request, and hover/selection state.

Why is this file needed?
------------------------
1. Sequencing: A look-at request for an exhibit on another platform must
   wait until the camera has been transported there.
2. Single owner: Only the store mutates NavigationState; views and the
   renderer read snapshots and listen to signals.
3. Decoupling: The store talks to the geometry code only through the
   ViewpointProvider protocol, injected at construction.

Transport completion:
    The renderer calls finish_transport() when its camera animation ends.
    A single-shot fallback timer forces completion if that call never
    comes. Whatever fires first wins; the other becomes a no-op.
    A pending view request is applied `settle_ms` after arrival, or
    synchronously inside finish_transport() when `settle_ms` is 0.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Optional, Protocol
import logging

from PySide6.QtCore import QObject, QTimer, Signal

from exhibitspace.config import HUB_PLATFORM_ID, START_PLATFORM_ID, TRANSPORT_FALLBACK_MS, VIEW_SETTLE_MS
from exhibitspace.model.exhibits import DisplayKind
from exhibitspace.model.viewpoints import CENTER_VIEW_NAME, ViewPoint

logger = logging.getLogger(__name__)


class ViewpointProvider(Protocol):
    """What the store needs from the geometry side."""

    def has_platform(self, platform_id: str) -> bool: ...

    def resolve_viewpoint(self, exhibit_id: str, display_kind: DisplayKind | str, platform_id: str) -> Optional[ViewPoint]: ...

    def fixed_viewpoint(self, platform_id: str, name: str = CENTER_VIEW_NAME) -> Optional[ViewPoint]: ...

    def guideline_viewpoint(self, platform_id: str, index: int) -> Optional[ViewPoint]: ...


@dataclass(frozen=True)
class ViewRequest(ABC):
    """A look-at instruction, possibly deferred until a transport completes."""
    platform_id: str

    @abstractmethod
    def resolve(self, provider: ViewpointProvider) -> Optional[ViewPoint]:
        pass


@dataclass(frozen=True)
class ExhibitViewRequest(ViewRequest):
    exhibit_id: str = ""
    display_kind: DisplayKind = DisplayKind.BOOTH

    def resolve(self, provider: ViewpointProvider) -> Optional[ViewPoint]:
        return provider.resolve_viewpoint(self.exhibit_id, self.display_kind, self.platform_id)


@dataclass(frozen=True)
class FixedViewRequest(ViewRequest):
    name: str = CENTER_VIEW_NAME

    def resolve(self, provider: ViewpointProvider) -> Optional[ViewPoint]:
        return provider.fixed_viewpoint(self.platform_id, self.name)


@dataclass(frozen=True)
class GuidelineViewRequest(ViewRequest):
    """Look at one of the hub's guideline posters."""
    index: int = 0

    def resolve(self, provider: ViewpointProvider) -> Optional[ViewPoint]:
        return provider.guideline_viewpoint(self.platform_id, self.index)


@dataclass
class NavigationState:
    current_platform_id: str = START_PLATFORM_ID
    transport_target_id: Optional[str] = None
    is_transporting: bool = False
    pending_view_request: Optional[ViewRequest] = None
    hovered_id: Optional[str] = None
    selected_id: Optional[str] = None
    selected_aspect_id: Optional[str] = None
    hovered_destination_id: Optional[str] = None
    view_target: Optional[ViewPoint] = None


class NavigationStore(QObject):
    """Navigation state machine with signals for renderer/panel sync."""
    state_changed = Signal(object)
    transport_started = Signal(str)
    transport_finished = Signal(str)
    viewpoint_published = Signal(object)
    request_dropped = Signal(object)

    def __init__(
        self,
        provider: ViewpointProvider,
        start_platform_id: str = START_PLATFORM_ID,
        *,
        fallback_ms: int = TRANSPORT_FALLBACK_MS,
        settle_ms: int = VIEW_SETTLE_MS,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        self._provider = provider
        self._state = NavigationState(current_platform_id=start_platform_id)

        self._fallback_timer = QTimer(self)
        self._fallback_timer.setSingleShot(True)
        self._fallback_timer.setInterval(fallback_ms)
        self._fallback_timer.timeout.connect(self._on_fallback_timeout)

        self._settle_timer = QTimer(self)
        self._settle_timer.setSingleShot(True)
        self._settle_timer.setInterval(settle_ms)
        self._settle_timer.timeout.connect(self._apply_pending_view)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def state(self) -> NavigationState:
        """Snapshot copy; mutating it does not affect the store."""
        return replace(self._state)

    @property
    def current_platform_id(self) -> str:
        return self._state.current_platform_id

    @property
    def is_transporting(self) -> bool:
        return self._state.is_transporting

    @property
    def pending_view_request(self) -> Optional[ViewRequest]:
        return self._state.pending_view_request

    def _emit_state(self) -> None:
        self.state_changed.emit(self.state)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def start_transport(self, target_id: str) -> bool:
        """
        Begin moving the camera to `target_id`.

        Returns:
            True if a transport started; False when one is already in
            flight, the viewer already stands on `target_id` or the
            platform does not exist.
        """
        if not self._provider.has_platform(target_id):
            logger.info(f"start_transport({target_id}) ignored: unknown platform")
            return False
        if self._state.is_transporting:
            logger.debug(f"start_transport({target_id}) ignored: already heading to {self._state.transport_target_id}")
            return False
        if target_id == self._state.current_platform_id:
            logger.debug(f"start_transport({target_id}) ignored: already there")
            return False

        self._state.transport_target_id = target_id
        self._state.is_transporting = True
        self._settle_timer.stop()
        self._fallback_timer.start()

        logger.info(f"Transport {self._state.current_platform_id} -> {target_id} started.")
        self.transport_started.emit(target_id)
        self._emit_state()
        return True

    def finish_transport(self) -> None:
        """Mark the transport as arrived. Called by the renderer or the fallback timer."""
        if not self._state.is_transporting:
            return

        self._fallback_timer.stop()
        arrived = self._state.transport_target_id
        self._state.current_platform_id = arrived
        self._state.transport_target_id = None
        self._state.is_transporting = False

        logger.info(f"Transport arrived at {arrived}.")
        self.transport_finished.emit(arrived)
        self._emit_state()

        if self._state.pending_view_request is not None:
            if self._settle_timer.interval() <= 0:
                self._apply_pending_view()
            else:
                self._settle_timer.start()

    def _on_fallback_timeout(self) -> None:
        logger.warning(
            f"Renderer did not confirm arrival at {self._state.transport_target_id}; forcing completion."
        )
        self.finish_transport()

    def set_current_platform(self, platform_id: str) -> bool:
        """Teleport without animation. Refused while a transport is in flight or for an unknown platform."""
        if self._state.is_transporting or not self._provider.has_platform(platform_id):
            return False
        self._state.current_platform_id = platform_id
        self._emit_state()
        return True

    # ------------------------------------------------------------------
    # View requests
    # ------------------------------------------------------------------
    def navigate_to_exhibit(self, exhibit_id: str, display_kind: DisplayKind | str, platform_id: str) -> bool:
        """
        Look at an exhibit, transporting to its platform first if needed.

        Returns:
            False if the request was ignored or could not be resolved.
        """
        try:
            kind = DisplayKind(display_kind)
        except ValueError:
            logger.info(f"Ignoring view request for '{exhibit_id}': unknown display kind {display_kind!r}.")
            return False
        request = ExhibitViewRequest(platform_id=platform_id, exhibit_id=exhibit_id, display_kind=kind)
        return self._navigate(request)

    def navigate_to_fixed_view(self, platform_id: str, name: str = CENTER_VIEW_NAME) -> bool:
        """Same as navigate_to_exhibit, for a hand-placed view (overview, reception)."""
        return self._navigate(FixedViewRequest(platform_id=platform_id, name=name))

    def navigate_to_guideline(self, index: int, platform_id: str = HUB_PLATFORM_ID) -> bool:
        """Same as navigate_to_exhibit, for guideline poster `index` on the hub."""
        return self._navigate(GuidelineViewRequest(platform_id=platform_id, index=index))

    def _navigate(self, request: ViewRequest) -> bool:
        if not self._provider.has_platform(request.platform_id):
            logger.info(f"Ignoring view request {request}: unknown platform.")
            return False

        if self._state.is_transporting:
            if request.platform_id != self._state.transport_target_id:
                logger.info(
                    f"Ignoring view request for {request.platform_id}: "
                    f"transport to {self._state.transport_target_id} cannot be cancelled."
                )
                return False
            self._state.pending_view_request = request
            self._emit_state()
            return True

        if request.platform_id == self._state.current_platform_id:
            self._settle_timer.stop()
            self._state.pending_view_request = None
            return self._publish(request)

        self._state.pending_view_request = request
        if not self.start_transport(request.platform_id):
            self._state.pending_view_request = None
            return False
        return True

    def _apply_pending_view(self) -> None:
        request = self._state.pending_view_request
        self._state.pending_view_request = None
        if request is None:
            return

        if self._state.is_transporting or request.platform_id != self._state.current_platform_id:
            self._drop(request, "viewer is no longer on the requested platform")
            self._emit_state()
            return

        self._publish(request)

    def _publish(self, request: ViewRequest) -> bool:
        viewpoint = request.resolve(self._provider)
        if viewpoint is None:
            self._drop(request, "target not found on platform")
            self._emit_state()
            return False

        self._state.view_target = viewpoint
        logger.debug(f"Publishing viewpoint for {request}.")
        self.viewpoint_published.emit(viewpoint)
        self._emit_state()
        return True

    def _drop(self, request: ViewRequest, reason: str) -> None:
        logger.info(f"Dropping stale view request {request}: {reason}.")
        self.request_dropped.emit(request)

    def clear_view_target(self) -> None:
        self._state.view_target = None
        self._emit_state()

    # ------------------------------------------------------------------
    # Selection / hover (no geometry involved)
    # ------------------------------------------------------------------
    def select_exhibit(self, exhibit_id: Optional[str]) -> None:
        self._state.selected_id = exhibit_id
        if exhibit_id is not None:
            # An exhibit card replaces an open aspect panel
            self._state.selected_aspect_id = None
        self._emit_state()

    def open_aspect(self, aspect_id: Optional[str]) -> None:
        """Toggle the aspect panel; opening one closes the exhibit card."""
        if aspect_id is None or self._state.selected_aspect_id == aspect_id:
            self._state.selected_aspect_id = None
        else:
            self._state.selected_aspect_id = aspect_id
            self._state.selected_id = None
        self._emit_state()

    def set_hovered(self, exhibit_id: Optional[str]) -> None:
        if self._state.hovered_id == exhibit_id:
            return
        self._state.hovered_id = exhibit_id
        self._emit_state()

    def set_hovered_destination(self, platform_id: Optional[str]) -> None:
        if self._state.hovered_destination_id == platform_id:
            return
        self._state.hovered_destination_id = platform_id
        self._emit_state()
