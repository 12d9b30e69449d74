"""stickerjournal weather: show current conditions."""

from __future__ import annotations

import click


@click.command()
@click.option("--lat", type=float, default=None, help="Latitude (defaults to weather.default_latitude).")
@click.option("--lon", type=float, default=None, help="Longitude (defaults to weather.default_longitude).")
@click.pass_context
def weather(ctx: click.Context, lat: float | None, lon: float | None) -> None:
    """Print the current temperature and conditions."""
    from stickerjournal.context.weather import WeatherClient
    from stickerjournal.core.cli.common import get_config

    info = WeatherClient.from_config(get_config(ctx)).current_weather(lat, lon)
    if info is None:
        click.echo("Weather unavailable.")
        return
    click.echo(f"{info.temp_c}°C {info.label}")
