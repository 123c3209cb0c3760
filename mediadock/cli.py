"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from mediadock.core.errors import MediadockError
from mediadock.core.model import PhysicalDevice, RecognizedDevice
from mediadock.core.service import MonitorService

app = typer.Typer(help="Track removable media players and report connect/disconnect events")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_service(catalog: str | None = None) -> MonitorService:
    service = MonitorService(catalog_path=catalog)
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("catalog")
def list_catalog(
    catalog: str | None = typer.Option(None, "--catalog", help="Catalog YAML file"),
) -> None:
    """List recognition rules in catalog order."""
    try:
        service = _build_service(catalog)
        rules = service.list_rules()
        if not rules:
            typer.echo("No recognition rules loaded")
            raise typer.Exit(code=1)

        for rule in rules:
            typer.echo(f"{rule.pattern}: {rule.name} ({rule.kind})")
    except MediadockError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("devices")
def list_devices(
    catalog: str | None = typer.Option(None, "--catalog", help="Catalog YAML file"),
) -> None:
    """List currently attached removable devices and their matched rule."""
    try:
        service = _build_service(catalog)
        matches = service.match_devices()
        if not matches:
            typer.echo("No removable devices found")
            return

        for device, recognized in matches:
            matched = recognized.name if recognized else "<no-match>"
            mount = device.mount_path or "<not-mounted>"
            typer.echo(f"{device.device_id} {device.name} {mount} -> {matched}")
    except MediadockError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("watch")
def watch(
    interval: float = typer.Option(2.0, "--interval", min=0.0, help="Seconds between polls"),
    count: int | None = typer.Option(None, "--count", min=1, help="Stop after N polls"),
    catalog: str | None = typer.Option(None, "--catalog", help="Catalog YAML file"),
) -> None:
    """Poll for devices and print connect/disconnect events."""

    def _on_connected(device: PhysicalDevice, recognized: RecognizedDevice) -> None:
        typer.echo(f"Connected: {device.device_id} ({recognized.name})")

    def _on_disconnected(device: PhysicalDevice, recognized: RecognizedDevice) -> None:
        typer.echo(f"Disconnected: {device.device_id} ({recognized.name})")

    try:
        service = _build_service(catalog)
        service.reconciler.device_connected.subscribe(_on_connected)
        service.reconciler.device_disconnected.subscribe(_on_disconnected)
        service.watch(interval, max_ticks=count)
    except KeyboardInterrupt:
        typer.echo("Stopped")
    except MediadockError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
