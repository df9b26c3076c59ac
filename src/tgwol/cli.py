"""Command-line interface for tgwol."""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import click

from tgwol import __version__
from tgwol.config.loader import ConfigError, ConfigProvider, Settings, level_from_name

if TYPE_CHECKING:
    from tgwol.core.router import CommandRouter

DEFAULT_CONFIG = Path.home() / ".config" / "tgwol" / "config.yaml"

LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


def setup_logging(level: str) -> None:
    """Configure root logging at an explicit level name (e.g. "info")."""
    numeric = level_from_name(level)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )
    # httpx logs every getUpdates long-poll at INFO
    logging.getLogger("httpx").setLevel(
        logging.DEBUG if numeric <= logging.DEBUG else logging.WARNING
    )


def _load_cfg(config: str) -> tuple[dict[str, Any], Settings]:
    from tgwol.config.loader import settings_from_config, validate_config

    try:
        raw = ConfigProvider(Path(config)).load()
    except ConfigError as exc:
        click.echo(f"Failed to load config: {exc}", err=True)
        sys.exit(1)
    errors = validate_config(raw)
    if errors:
        click.echo("Config validation errors:", err=True)
        for e in errors:
            click.echo(f"  • {e}", err=True)
        sys.exit(1)
    return raw, settings_from_config(raw)


def _make_router(config: str, settings: Settings) -> "CommandRouter":
    from tgwol.core.registry import DeviceRegistry
    from tgwol.core.router import CommandRouter

    return CommandRouter(
        DeviceRegistry(ConfigProvider(Path(config))),
        separator=settings.mac_separator,
        broadcast_ip=settings.broadcast_ip,
        port=settings.wol_port,
    )


# ── Root group ────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="tgwol")
@click.option(
    "--config",
    "-c",
    default=str(DEFAULT_CONFIG),
    envvar="TGWOL_CONFIG",
    show_default=True,
    help="Path to tgwol config.yaml",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (overrides log_level from the config file; default: info)",
)
@click.pass_context
def main(ctx: click.Context, config: str, log_level: Optional[str]) -> None:
    """tgwol: Wake-on-LAN from a Telegram chat."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["log_level"] = log_level
    # Until the config is read, honour only the explicit option.
    setup_logging(log_level or "info")


def _apply_log_level(ctx: click.Context, settings: Settings) -> None:
    if ctx.obj["log_level"] is None:
        setup_logging(settings.log_level)


# ── run command ───────────────────────────────────────────────────────────────


@main.command()
@click.option("--poll-timeout", default=30, show_default=True, help="getUpdates long-poll seconds")
@click.option("--workers", default=4, show_default=True, help="Concurrent command handlers")
@click.pass_context
def run(ctx: click.Context, poll_timeout: int, workers: int) -> None:
    """Start the bot and serve commands until interrupted."""
    from tgwol.bot.telegram import TelegramClient, run_polling

    _, settings = _load_cfg(ctx.obj["config"])
    _apply_log_level(ctx, settings)
    logger = logging.getLogger("tgwol")
    logger.info("Starting wol bot v%s...", __version__)

    router = _make_router(ctx.obj["config"], settings)
    client = TelegramClient(settings.token)
    try:
        run_polling(client, router, poll_timeout=poll_timeout, max_workers=workers)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        client.close()


# ── wake command ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("device")
@click.option(
    "--sender-id",
    default=0,
    show_default=True,
    help="Telegram user id to authorize as",
)
@click.pass_context
def wake(ctx: click.Context, device: str, sender_id: int) -> None:
    """Wake DEVICE locally, applying the same checks as the bot."""
    from tgwol.core.router import WakeCommand

    _, settings = _load_cfg(ctx.obj["config"])
    _apply_log_level(ctx, settings)
    reply = _make_router(ctx.obj["config"], settings).handle(WakeCommand(device), sender_id)
    click.echo(reply.text, err=not reply.sent)
    if not reply.sent:
        sys.exit(2)


# ── devices command ───────────────────────────────────────────────────────────


@main.command()
@click.pass_context
def devices(ctx: click.Context) -> None:
    """List configured devices."""
    from tgwol.core.registry import ANY_SENDER, DeviceNotConfigured

    _, settings = _load_cfg(ctx.obj["config"])
    _apply_log_level(ctx, settings)
    registry = _make_router(ctx.obj["config"], settings).registry
    names = registry.names()
    if not names:
        click.echo("No devices configured.")
        return
    click.echo(f"{'NAME':<20} {'MAC':<20} {'OWNER'}")
    click.echo("─" * 52)
    for name in names:
        try:
            dev = registry.lookup(name)
        except DeviceNotConfigured:
            click.echo(f"{name:<20} (not correctly configured)")
            continue
        owner = "anyone" if dev.owner_id == ANY_SENDER else str(dev.owner_id)
        click.echo(f"{dev.name:<20} {dev.mac_address:<20} {owner}")


# ── check command ─────────────────────────────────────────────────────────────


@main.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate the config file and report unusable devices."""
    from tgwol.config.loader import device_warnings

    raw, settings = _load_cfg(ctx.obj["config"])
    _apply_log_level(ctx, settings)
    warnings = device_warnings(raw, settings.mac_separator)
    for w in warnings:
        click.echo(f"  • {w}")
    click.echo(f"Config OK ({len(warnings)} device warning(s))")


if __name__ == "__main__":
    main()
