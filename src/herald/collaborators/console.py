"""Rendering surface that prints heads-up cards to a rich console.

Stands in for the real window surface when replaying event scripts.
Animations complete at once, or after their configured durations on a
scheduler.
"""

import itertools
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console
from rich.panel import Panel

from herald.collaborators.base import RenderingSurface, Scheduler
from herald.headsup.template import TemplateKind
from herald.notifications.item import NotificationItem

_TEMPLATE_STYLES = {
    TemplateKind.CAR_EMERGENCY: "bold red",
    TemplateKind.CAR_WARNING: "yellow",
    TemplateKind.CAR_INFORMATION: "blue",
    TemplateKind.MESSAGE: "green",
    TemplateKind.INBOX: "cyan",
    TemplateKind.BASIC: "white",
}


@dataclass
class ConsoleView:
    """Handle for one card printed by ConsoleSurface."""

    view_id: int
    entry_id: str
    template_kind: TemplateKind
    item: NotificationItem
    visible: bool = False
    entering: bool = False
    released: bool = False


class ConsoleSurface(RenderingSurface):
    """Prints present/update/remove events as rich panels."""

    def __init__(
        self,
        console: Console | None = None,
        scheduler: Scheduler | None = None,
        enter_animation_ms: int = 0,
        alpha_enter_animation_ms: int = 0,
        exit_animation_ms: int = 0,
    ) -> None:
        """Initialize the surface.

        Args:
            console: Console to print to.
            scheduler: When given, enter and exit animations complete on
                this scheduler after their durations instead of at once.
            enter_animation_ms: Simulated slide-in length.
            alpha_enter_animation_ms: Simulated fade-in length; the card
                finishes entering when the longer of the two ends.
            exit_animation_ms: Simulated exit animation length.
        """
        self._console = console or Console()
        self._scheduler = scheduler
        self._enter_animation_ms = max(enter_animation_ms, alpha_enter_animation_ms)
        self._exit_animation_ms = exit_animation_ms
        self._ids = itertools.count(1)
        self.views: dict[int, ConsoleView] = {}

    def present(
        self,
        entry_id: str,
        template_kind: TemplateKind,
        item: NotificationItem,
    ) -> ConsoleView:
        view = ConsoleView(next(self._ids), entry_id, template_kind, item)
        self.views[view.view_id] = view
        return view

    def update_content(self, handle: ConsoleView, item: NotificationItem) -> None:
        handle.item = item
        self._print(handle, "updated")

    def dismiss(self, handle: ConsoleView) -> None:
        handle.visible = False
        handle.released = True
        self.views.pop(handle.view_id, None)
        self._console.print(f"[dim]  ✕ heads-up {handle.entry_id} gone[/]")

    def animate_in(self, handle: ConsoleView) -> None:
        handle.visible = True
        self._print(handle, "heads-up")
        if self._scheduler is not None and self._enter_animation_ms > 0:
            handle.entering = True
            self._scheduler.schedule(self._enter_animation_ms, lambda: self._finish_enter(handle))

    def _finish_enter(self, handle: ConsoleView) -> None:
        handle.entering = False

    def animate_out(self, handle: ConsoleView, on_complete: Callable[[], None]) -> None:
        handle.visible = False
        handle.entering = False
        if self._scheduler is not None and self._exit_animation_ms > 0:
            self._scheduler.schedule(self._exit_animation_ms, on_complete)
        else:
            on_complete()

    def _print(self, view: ConsoleView, label: str) -> None:
        item = view.item
        title = item.extras.get("title") or item.package_name
        text = item.extras.get("text", "")
        style = _TEMPLATE_STYLES[view.template_kind]
        self._console.print(Panel(
            str(text),
            title=f"[{style}]{title}[/]",
            subtitle=f"{label} · {view.template_kind.value} · {item.key}",
            border_style=style,
            expand=False,
        ))
