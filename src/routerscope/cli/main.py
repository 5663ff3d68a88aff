"""RouterScope CLI."""

from __future__ import annotations

import importlib
import json

import click

from routerscope.exceptions import BackendLoadError
from routerscope.services.base import DeviceApiClient, PollingClient, StatisticsService
from routerscope.utils.logging import setup_logging


def load_backend(spec: str) -> tuple[DeviceApiClient, PollingClient, StatisticsService]:
    """Resolve a ``module:attribute`` string and call it to build collaborators.

    The factory takes no arguments and returns a
    ``(device_api, polling_client, statistics)`` tuple.

    Raises:
        BackendLoadError: If the string is malformed, the import fails, the
            factory raises, or it does not return three collaborators.
    """
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise BackendLoadError(f"Backend must look like 'package.module:factory', got {spec!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise BackendLoadError(f"Cannot import backend module {module_name!r}: {exc}") from exc
    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise BackendLoadError(f"Backend module {module_name!r} has no callable {attr!r}")

    try:
        collaborators = factory()
    except Exception as exc:
        raise BackendLoadError(f"Backend factory {spec!r} failed: {exc}") from exc
    if not isinstance(collaborators, tuple) or len(collaborators) != 3:
        raise BackendLoadError(
            f"Backend factory {spec!r} must return (device_api, polling_client, statistics)"
        )
    return collaborators


def _load_settings():
    from pydantic import ValidationError

    from routerscope.config import CoordinatorSettings

    try:
        return CoordinatorSettings.from_env()
    except ValidationError as exc:
        raise click.ClickException(f"Invalid ROUTERSCOPE_* setting: {exc}") from exc


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def cli(ctx: click.Context, debug: bool, json_output: bool) -> None:
    """RouterScope - router registry and connection control."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["json_output"] = json_output
    setup_logging(level="DEBUG" if debug else "INFO", json_output=json_output)


@cli.command()
@click.pass_context
def settings(ctx: click.Context) -> None:
    """Show the effective coordinator settings (after ROUTERSCOPE_* overrides)."""
    effective = _load_settings()
    if ctx.obj.get("json_output"):
        click.echo(json.dumps(effective.model_dump(mode="json", exclude={"new_target": {"password"}}), indent=2))
        return
    click.echo(f"Log entries per refresh: {effective.log_entry_count}")
    click.echo(f"Fetch policy: {effective.fetch_policy.value}")
    defaults = effective.new_target
    click.echo("New target defaults:")
    click.echo(f"  Name: {defaults.name}")
    click.echo(f"  Address: {defaults.address}:{defaults.port}")
    click.echo(f"  Username: {defaults.username}")
    click.echo(f"  Polling: {'on' if defaults.use_polling else 'off'} "
               f"({defaults.polling_community}@{defaults.polling_port})")


@cli.command()
@click.option("--backend", required=True, help="Collaborator factory as 'package.module:factory'")
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", type=int, default=8000, help="HTTP port")
def serve(backend: str, host: str, port: int) -> None:
    """Start the HTTP API around a fresh coordinator."""
    import uvicorn
    from routerscope.api.app import create_app
    from routerscope.core.coordinator import ConnectionLifecycleCoordinator

    try:
        device_api, polling_client, statistics = load_backend(backend)
    except BackendLoadError as exc:
        raise click.ClickException(str(exc)) from exc

    coordinator = ConnectionLifecycleCoordinator(
        device_api,
        polling_client,
        statistics,
        targets=[],
        settings=_load_settings(),
    )
    app = create_app(coordinator)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    cli()
