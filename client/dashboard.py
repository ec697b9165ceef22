"""
Headless dashboard views.

Views combine a resource with search/sort state. ``render()`` returns a
rich renderable (a table, a loading line or an error banner above the last
known list) and ``print()`` writes it to a console.

Statuses arrive from the API as enum names (``IN_PROGRESS``); the helpers
here accept those as well as the display labels (``In Progress``).
"""

from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from client.resources import Resource, StudentTasksResource

STATUS_LABELS = OrderedDict([
    ("NOT_STARTED", "Not Started"),
    ("PENDING", "Pending"),
    ("IN_PROGRESS", "In Progress"),
    ("COMPLETED", "Completed"),
])
STATUS_ORDER = list(STATUS_LABELS.values())
STATUS_COLORS = {
    "Not Started": "grey50",
    "Pending": "yellow",
    "In Progress": "blue",
    "Completed": "green",
}

DATE_KEYS = {"dueDate", "startDate", "endDate", "createdAt", "updatedAt"}


def status_label(status: Optional[str]) -> Optional[str]:
    if status is None:
        return None
    return STATUS_LABELS.get(status, status)


def status_from_progress(progress: Optional[int], status: Optional[str] = None) -> str:
    """Display status derived from progress, falling back to the stored status."""
    progress = progress or 0
    if progress >= 100:
        return "Completed"
    if progress > 50:
        return "In Progress"
    if status_label(status) == "Pending":
        return "Pending"
    return "Not Started"


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            try:
                return date.fromisoformat(value[:10])
            except ValueError:
                return None
    return None


def get_path(item: Dict[str, Any], key: str) -> Any:
    """Dotted lookup, e.g. ``project.title``."""
    value: Any = item
    for part in key.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def sort_items(items: Sequence[Dict[str, Any]], key: str, direction: str = "asc") -> List[Dict[str, Any]]:
    """Sort copies of ``items`` by ``key``.

    Status follows board order, date keys compare as dates, progress
    numerically, everything else as case-insensitive text. Missing values
    sort first in ascending order.
    """
    reverse = direction == "desc"

    def sort_key(item):
        value = get_path(item, key)
        if key == "status":
            label = status_label(value)
            return (label in STATUS_ORDER, STATUS_ORDER.index(label) if label in STATUS_ORDER else -1)
        if key in DATE_KEYS:
            parsed = parse_date(value)
            return (parsed is not None, parsed or date.min)
        if key == "progress":
            return (True, value or 0)
        if value is None:
            return (False, "")
        return (True, str(value).lower())

    return sorted(items, key=sort_key, reverse=reverse)


def filter_items(
    items: Iterable[Dict[str, Any]],
    search: str = "",
    fields: Sequence[str] = ("title", "description"),
    status: Optional[str] = None,
) -> List[Dict[str, Any]]:
    needle = (search or "").strip().lower()
    wanted = status_label(status) if status else None
    result = []
    for item in items:
        if wanted and status_label(item.get("status")) != wanted:
            continue
        if needle and not any(needle in str(get_path(item, f) or "").lower() for f in fields):
            continue
        result.append(item)
    return result


def status_breakdown(items: Iterable[Dict[str, Any]]) -> "OrderedDict[str, int]":
    counts: "OrderedDict[str, int]" = OrderedDict((label, 0) for label in STATUS_ORDER)
    for item in items:
        label = status_label(item.get("status"))
        if label in counts:
            counts[label] += 1
    return counts


def status_chart(counts: Dict[str, int], width: int = 30) -> Table:
    total = sum(counts.values()) or 1
    chart = Table.grid(padding=(0, 1))
    chart.add_column(justify="right")
    chart.add_column()
    chart.add_column(justify="right")
    for label, count in counts.items():
        bar = "█" * round(width * count / total)
        chart.add_row(label, Text(bar, style=STATUS_COLORS.get(label, "")), str(count))
    return chart


def _names(people: Optional[List[Dict[str, Any]]]) -> str:
    names = [get_path(p, "user.name") or p.get("id", "") for p in people or []]
    return ", ".join(n for n in names if n) or "-"


class ListView:
    title = ""
    search_fields: Sequence[str] = ("title", "description")

    def __init__(self, resource: Resource, console: Optional[Console] = None):
        self.resource = resource
        self.console = console or Console()
        self.search = ""
        self.status_filter: Optional[str] = None
        self.sort_key = "title"
        self.sort_direction = "asc"

    def toggle_sort(self, key: str) -> None:
        if self.sort_key == key:
            self.sort_direction = "desc" if self.sort_direction == "asc" else "asc"
        else:
            self.sort_key = key
            self.sort_direction = "asc"

    @property
    def visible_items(self) -> List[Dict[str, Any]]:
        items = filter_items(self.resource.items, self.search, self.search_fields, self.status_filter)
        return sort_items(items, self.sort_key, self.sort_direction)

    async def load(self, force_refresh: bool = False) -> None:
        await self.resource.fetch(force_refresh=force_refresh)

    def dismiss_error(self) -> None:
        self.resource.dismiss_error()

    def build_table(self, items: List[Dict[str, Any]]) -> Table:
        raise NotImplementedError

    def render(self):
        if self.resource.loading and not self.resource.items:
            return Text(f"Loading {self.title.lower()}...", style="italic")
        parts = []
        if self.resource.error:
            parts.append(Panel(Text(self.resource.error, style="bold red"), title="Error", border_style="red"))
        if self.resource.loading:
            parts.append(Text("Refreshing...", style="italic"))
        items = self.visible_items
        if items:
            parts.append(self.build_table(items))
        elif not self.resource.error:
            parts.append(Text(f"No {self.title.lower()} found"))
        return Group(*parts)

    def print(self) -> None:
        self.console.print(self.render())


class ProjectListView(ListView):
    title = "Projects"
    search_fields = ("title", "description", "category")

    def build_table(self, items: List[Dict[str, Any]]) -> Table:
        table = Table(title=self.title)
        table.add_column("Title", style="bold")
        table.add_column("Category")
        table.add_column("Status")
        table.add_column("Progress", justify="right")
        table.add_column("Dates")
        table.add_column("Students")
        for p in items:
            label = status_from_progress(p.get("progress"), p.get("status"))
            table.add_row(
                p.get("title", ""),
                p.get("category") or "-",
                Text(label, style=STATUS_COLORS.get(label, "")),
                f"{p.get('progress') or 0}%",
                f"{p.get('startDate', '')} → {p.get('endDate', '')}",
                _names(p.get("studentsWorkingOn")),
            )
        return table


class TaskListView(ListView):
    title = "Tasks"
    search_fields = ("title", "description", "project.title")

    def __init__(self, resource: Resource, console: Optional[Console] = None):
        super().__init__(resource, console)
        self.sort_key = "dueDate"

    def build_table(self, items: List[Dict[str, Any]]) -> Table:
        table = Table(title=self.title)
        table.add_column("Title", style="bold")
        table.add_column("Project")
        table.add_column("Due")
        table.add_column("Status")
        table.add_column("Students")
        for t in items:
            label = status_label(t.get("status")) or "-"
            table.add_row(
                t.get("title", ""),
                get_path(t, "project.title") or "-",
                str(t.get("dueDate") or "-"),
                Text(label, style=STATUS_COLORS.get(label, "")),
                _names(t.get("studentsWorkingOn")),
            )
        return table


class StudentHomeView(TaskListView):
    """A student's own tasks with summary numbers and a status chart."""

    title = "My Tasks"

    def __init__(self, resource: StudentTasksResource, console: Optional[Console] = None, today: Optional[date] = None):
        super().__init__(resource, console)
        self.today = today

    def stats(self) -> Dict[str, int]:
        today = self.today or date.today()
        items = self.resource.items
        counts = status_breakdown(items)
        overdue = 0
        for t in items:
            due = parse_date(t.get("dueDate"))
            if due is not None and due < today and status_label(t.get("status")) != "Completed":
                overdue += 1
        return {
            "total": len(items),
            "completed": counts["Completed"],
            "in_progress": counts["In Progress"],
            "overdue": overdue,
        }

    def render(self):
        if self.resource.loading and not self.resource.items:
            return super().render()
        s = self.stats()
        summary = Table.grid(padding=(0, 3))
        for _ in range(4):
            summary.add_column(justify="center")
        summary.add_row("Total", "Completed", "In Progress", "Overdue")
        summary.add_row(str(s["total"]), str(s["completed"]), str(s["in_progress"]), str(s["overdue"]))
        chart = Panel(status_chart(status_breakdown(self.resource.items)), title="By status")
        return Group(summary, chart, super().render())
