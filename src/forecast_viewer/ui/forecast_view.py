"""Rich renderer for the published forecast state."""

from __future__ import annotations

from datetime import UTC, datetime

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..redaction import sanitize_text
from ..state import LoadState
from ..weather.models import CurrentConditions, DayForecast, HourlyPoint, Location

DEGREE_C = "℃"


def format_temperature(value: float) -> str:
    return f"{value:g}{DEGREE_C}"


def format_whole_temperature(value: float) -> str:
    return f"{int(value)}{DEGREE_C}"


def format_day(date_epoch: int) -> str:
    return datetime.fromtimestamp(date_epoch, UTC).strftime("%d.%m.%Y")


class ForecastView:
    """Read-only presentation of a LoadState; never writes state back."""

    def __init__(self, console: Console | None = None, *, max_hours: int = 24) -> None:
        self.console = console or Console()
        self.max_hours = max_hours

    def __call__(self, state: LoadState) -> None:
        """State listener: print each settled state (loading states are skipped)."""
        if state.loading:
            return
        self.console.print(self.render(state))

    def render(self, state: LoadState) -> RenderableType:
        parts: list[RenderableType] = []
        if state.loading:
            parts.append(Text("Загрузка…", style="dim"))
        if state.warning is not None:
            parts.append(
                Text(f"Геопозиция недоступна: {sanitize_text(str(state.warning))}", style="yellow")
            )
        if state.error is not None:
            parts.append(
                Text(f"Ошибка: {sanitize_text(str(state.error))}", style="bold red")
            )
        if state.location is not None and state.current is not None:
            parts.append(self._render_current(state.location, state.current))
        if state.hourly_window:
            parts.append(self._render_hourly(state.hourly_window))
        if state.days:
            parts.append(self._render_days(state.days))
        if not parts:
            parts.append(Text("Нет данных", style="dim"))
        return Group(*parts)

    def _render_current(self, location: Location, current: CurrentConditions) -> RenderableType:
        body = Text()
        body.append(format_temperature(current.temperature_c), style="bold")
        body.append(f"  {current.condition_text}")
        today = datetime.now().strftime("%d.%m.%Y")
        return Panel(body, title=location.name, subtitle=f"Сегодня {today}")

    def _render_hourly(self, hours: tuple[HourlyPoint, ...]) -> RenderableType:
        shown = hours[: self.max_hours]
        table = Table(title="По часам", show_header=False)
        for _ in shown:
            table.add_column(justify="center")
        table.add_row(*(hour.hour_label for hour in shown))
        table.add_row(*(format_whole_temperature(hour.temperature_c) for hour in shown))
        return table

    def _render_days(self, days: tuple[DayForecast, ...]) -> RenderableType:
        table = Table(title="Прогноз")
        table.add_column("Дата")
        table.add_column("Мин / Макс", justify="right")
        for day in days:
            table.add_row(
                format_day(day.date_epoch),
                f"{format_whole_temperature(day.min_temp_c)} / "
                f"{format_whole_temperature(day.max_temp_c)}",
            )
        return table
