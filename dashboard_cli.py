"""Terminal front end for the weather dashboard."""

import argparse
import asyncio
import logging
import os
import sys
from typing import Callable

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config_loader import load_config
from dashboard import CONFIRM_KEY, Dashboard, InputChanged, KeyPressed, Position, StaticGeolocation
from presentation import DashboardView, Icon, Theme

logger = logging.getLogger(__name__)

ICON_GLYPHS = {
    Icon.CLEAR: "☀",
    Icon.CLOUDY: "☁",
    Icon.RAIN: "🌧",
    Icon.SNOW: "❄",
    Icon.DRIZZLE: "🌦",
    Icon.THUNDERSTORM: "⚡",
}

THEME_STYLES = {
    Theme.DEFAULT: "cyan",
    Theme.RAINY: "dark_cyan",
    Theme.NIGHT: "grey37",
}

QUIT_WORDS = {"q", "quit", "exit"}
REFRESH_PER_SECOND = 4
PROMPT = "Type a city and press Enter (q to quit)"


def _show(value, unit: str = "") -> str:
    if value is None:
        return "-"
    return f"{value}{unit}"


def _frame(border: str, *parts):
    return Panel(Group(*parts), border_style=border, subtitle=PROMPT)


def render(view: DashboardView):
    """Build the rich renderable for one frame of the dashboard."""
    border = THEME_STYLES[view.theme]
    header = Text(f"Weather Forecast\n{view.date_line}  {view.clock}", justify="center", style="bold")

    if view.loading:
        return _frame(border, header, Text("Loading weather data...", justify="center"))
    if view.error:
        body = Text(view.error, style="bold red", justify="center")
        return _frame(border, header, body)
    if view.current is None:
        return _frame(border, header)

    current = view.current
    now_table = Table.grid(padding=(0, 2))
    now_table.add_column()
    now_table.add_column()
    now_table.add_row(
        Text(f"{ICON_GLYPHS[current.icon]}  {current.temperature}°", style="bold"),
        f"{current.text}\nFeels like {_show(current.feels_like, '°')}",
    )
    now_table.add_row("Wind", f"{_show(current.wind_kph, ' km/h')} {current.wind_dir or ''}")
    now_table.add_row("Humidity", _show(current.humidity, "%"))
    now_table.add_row("Visibility", _show(current.vis_km, " km"))
    now_table.add_row("Pressure", _show(current.pressure_mb, " mb"))
    now_table.add_row("Sunrise", current.sunrise)
    now_table.add_row("Sunset", current.sunset)

    days = Table(title="5-Day Forecast", expand=True)
    for day in view.days:
        days.add_column(day.label, justify="center")
    days.add_row(*[f"{ICON_GLYPHS[d.icon]}\n{d.text}" for d in view.days])
    days.add_row(*[f"{d.max_temp}° / {d.min_temp}°" for d in view.days])
    days.add_row(*[f"rain {_show(d.chance_of_rain, '%')}" for d in view.days])

    place = Panel(
        now_table,
        title=current.place,
        subtitle=f"Local: {current.local_time}",
    )
    return _frame(border, header, place, days)


async def run(dashboard: Dashboard, console: Console, read_line: Callable[[], str] = sys.stdin.readline):
    """Drive the dashboard until quit; the frame is redrawn live so the clock keeps moving."""
    await dashboard.mount()
    try:
        with Live(
            get_renderable=lambda: render(dashboard.view()),
            console=console,
            refresh_per_second=REFRESH_PER_SECOND,
        ):
            while True:
                line = await asyncio.to_thread(read_line)
                # readline gives "" only at end of input
                if not line or line.strip().lower() in QUIT_WORDS:
                    break
                dashboard.dispatch(InputChanged(line.rstrip("\n")))
                dashboard.dispatch(KeyPressed(CONFIRM_KEY))
    finally:
        await dashboard.teardown()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Current conditions and a 5-day forecast in the terminal")
    parser.add_argument("--lat", type=float, default=os.getenv("DASHBOARD_LAT"))
    parser.add_argument("--lon", type=float, default=os.getenv("DASHBOARD_LON"))
    parser.add_argument("--proxy-url", default=None, help="weather proxy endpoint")
    parser.add_argument("--config", default=None, help="path to config.toml")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = load_config(args.config)
    dashboard_config = config.dashboard
    if args.proxy_url:
        dashboard_config = dashboard_config.model_copy(update={"proxy_url": args.proxy_url})

    position = None
    if args.lat is not None and args.lon is not None:
        position = Position(latitude=float(args.lat), longitude=float(args.lon))

    dashboard = Dashboard(dashboard_config, geolocation=StaticGeolocation(position))
    try:
        asyncio.run(run(dashboard, Console()))
    except (KeyboardInterrupt, EOFError):
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
