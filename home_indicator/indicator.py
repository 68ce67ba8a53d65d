# indicator.py
"""Panel indicator: the status-area widget, its rendering rules and the
enable/disable lifecycle that keeps it refreshed."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Set

from home_indicator.config import INDICATOR_UUID, POLL_SECONDS
from home_indicator.routes import UNEXPECTED, Failure, FetchOutcome, RouteDataSource, Success
from home_indicator.scheduler import RefreshScheduler, SchedulerHandle

logger = logging.getLogger("home_indicator.indicator")

NO_DATA_LABEL = "🚆 n.a."
NO_MORE_ROUTES = "no more routes"
ERROR_PREFIX = "Error: "

Fetch = Callable[[], Awaitable[FetchOutcome]]


class PopupMenu:
    def __init__(self):
        self._items: List[str] = []

    @property
    def items(self) -> List[str]:
        return list(self._items)

    def remove_all(self) -> None:
        self._items.clear()

    def add_menu_item(self, text: str) -> None:
        self._items.append(text)


class StatusArea:
    """Panel attachment point holding one persistent widget per key."""

    def __init__(self):
        self._widgets: Dict[str, Any] = {}

    def add(self, key: str, widget: Any) -> None:
        if key in self._widgets:
            raise ValueError(f"status area already has a widget for {key!r}")
        self._widgets[key] = widget

    def remove(self, key: str) -> None:
        self._widgets.pop(key, None)

    def get(self, key: str) -> Optional[Any]:
        return self._widgets.get(key)

    def keys(self) -> List[str]:
        return list(self._widgets)


class HomeIndicator:
    def __init__(self, name: str):
        self.name = name
        self.label = ""
        self.menu = PopupMenu()
        self.error: Optional[str] = None
        self.updated_at: Optional[str] = None
        self._alive = True
        self.show_routes([])

    @property
    def alive(self) -> bool:
        return self._alive

    def show_routes(self, routes: Sequence[str]) -> None:
        self.menu.remove_all()
        self.error = None
        if routes and routes[0].strip():
            self.label = routes[0]
            for route in routes[1:]:
                self.menu.add_menu_item(route)
        else:
            self.label = NO_DATA_LABEL
            self.menu.add_menu_item(NO_MORE_ROUTES)
        self._touch()

    def show_error(self, message: str) -> None:
        self.label = f"{ERROR_PREFIX}{message}"
        self.error = message
        self.menu.remove_all()
        self._touch()

    def destroy(self) -> None:
        self.menu.remove_all()
        self._alive = False

    def snapshot(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "routes": self.menu.items,
            "error": self.error,
            "updated_at": self.updated_at,
        }

    def _touch(self) -> None:
        self.updated_at = datetime.now().astimezone().isoformat()


async def update_routes_on_indicator(indicator: HomeIndicator, fetch: Fetch) -> None:
    try:
        outcome = await fetch()
    except Exception as e:
        logger.exception("Route fetch raised")
        outcome = Failure(reason=str(e) or type(e).__name__, kind=UNEXPECTED)

    # The indicator may have been destroyed while the command was running.
    if not indicator.alive:
        logger.debug("Dropping routes for destroyed indicator %s", indicator.name)
        return

    if isinstance(outcome, Success):
        indicator.show_routes(outcome.routes)
    else:
        message = outcome.describe()
        logger.error("Failed to update routes: %s", message)
        indicator.show_error(message)


class EnabledExtension:
    """Everything that exists while the extension is enabled."""

    def __init__(
        self,
        uuid: str,
        status_area: StatusArea,
        scheduler: RefreshScheduler,
        fetch: Fetch,
        interval: float,
    ):
        self.uuid = uuid
        self._status_area = status_area
        self._scheduler = scheduler
        self._fetch = fetch
        self._tasks: Set[asyncio.Task] = set()
        # Cleared on destroy; the timer callback checks it before every update.
        self.indicator: Optional[HomeIndicator] = HomeIndicator(name=f"{uuid} indicator")
        status_area.add(uuid, self.indicator)
        self.timer: Optional[SchedulerHandle] = None
        try:
            self.timer = scheduler.start(interval, self._on_tick)
            logger.info("Updating initial routes")
            self._spawn_update(self.indicator)
        except Exception:
            # Leave the status area free so a later activation can start over.
            self.destroy()
            raise

    @property
    def pending(self) -> List[asyncio.Task]:
        return list(self._tasks)

    def _on_tick(self) -> bool:
        if self.indicator is None:
            # No point in keeping the timer once the indicator is gone.
            return False
        self._spawn_update(self.indicator)
        return True

    def _spawn_update(self, indicator: HomeIndicator) -> None:
        # Overlapping fetches are not coalesced; each one renders when it finishes.
        task = asyncio.get_running_loop().create_task(
            update_routes_on_indicator(indicator, self._fetch)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def refresh(self) -> None:
        if self.indicator is not None:
            await update_routes_on_indicator(self.indicator, self._fetch)

    def destroy(self) -> None:
        if self.timer is not None:
            self._scheduler.stop(self.timer)
        if self.indicator is not None:
            self._status_area.remove(self.uuid)
            self.indicator.destroy()
            self.indicator = None


class HomeExtension:
    """Host-facing entry points. ``activate`` and ``deactivate`` are idempotent."""

    def __init__(
        self,
        uuid: str = INDICATOR_UUID,
        status_area: Optional[StatusArea] = None,
        fetch: Optional[Fetch] = None,
        interval: float = POLL_SECONDS,
        scheduler_factory: Callable[[], RefreshScheduler] = RefreshScheduler,
    ):
        self.uuid = uuid
        self.status_area = status_area if status_area is not None else StatusArea()
        self.fetch = fetch if fetch is not None else RouteDataSource().fetch
        self.interval = interval
        self.scheduler_factory = scheduler_factory
        self._enabled: Optional[EnabledExtension] = None

    @property
    def active(self) -> bool:
        return self._enabled is not None

    @property
    def enabled(self) -> Optional[EnabledExtension]:
        return self._enabled

    @property
    def indicator(self) -> Optional[HomeIndicator]:
        return self._enabled.indicator if self._enabled is not None else None

    def activate(self) -> None:
        if self._enabled is None:
            logger.info("Activating %s (every %ss)", self.uuid, self.interval)
            self._enabled = EnabledExtension(
                self.uuid,
                self.status_area,
                self.scheduler_factory(),
                self.fetch,
                self.interval,
            )

    def deactivate(self) -> None:
        if self._enabled is not None:
            logger.info("Deactivating %s", self.uuid)
            self._enabled.destroy()
        self._enabled = None

    async def refresh(self) -> None:
        if self._enabled is None:
            raise RuntimeError(f"{self.uuid} is not active")
        await self._enabled.refresh()
