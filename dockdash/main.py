"""Точка входа dockdash: одна команда фасада из командной строки."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from dockdash import __version__
from dockdash.app import ControlPlane, create_application
from dockdash.docker_api.dispatcher import CommandDispatcher
from dockdash.docker_api.exceptions import ConnectionSetupError, FacadeError
from dockdash.settings.exceptions import SettingsError
from dockdash.settings.observers import LogLevelObserver
from dockdash.settings.registry import SettingsRegistry
from dockdash.utils.logger import configure_logging
from dockdash.utils.paths import resolve_workspace

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STARTUP_FAILED = 1
EXIT_COMMAND_FAILED = 2

Handler = Callable[[CommandDispatcher, argparse.Namespace], Awaitable[Any]]


def initialize_settings(config_path: Path) -> SettingsRegistry:
    """Создаёт реестр настроек и загружает config.json."""

    registry = SettingsRegistry(config_path=config_path)
    registry.load_from_disk()
    registry.register_observer(LogLevelObserver())
    return registry


def setup_logging_from_settings(
    base_dir: Path, settings: SettingsRegistry, *, console: bool = True
) -> None:
    """Настраивает логирование в соответствии с группой "logging"."""

    logging_settings = settings.get_group("logging")
    if not logging_settings.get("enabled"):
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    configure_logging(
        log_dir=base_dir / "logs",
        level_name=logging_settings.get("level", "INFO"),
        max_bytes=logging_settings.get("max_file_size_mb", 10) * 1024 * 1024,
        backup_count=logging_settings.get("max_archived_files", 5),
        console=console,
    )


def initialize_workdir(base_dir: Path) -> bool:
    """Создаёт рабочую структуру (~/.dockdash, logs)."""

    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        (base_dir / "logs").mkdir(exist_ok=True)
        return True
    except OSError as exc:
        LOGGER.error("Cannot initialize workspace %s: %s", base_dir, exc)
        return False


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False), flush=True)


def _print_line(line: str) -> None:
    sys.stdout.write(line)
    sys.stdout.flush()


def _print_error(exc: FacadeError) -> None:
    print(json.dumps(exc.to_dict(), ensure_ascii=False), file=sys.stderr)


async def _listing(result: Awaitable[List[Any]]) -> None:
    _print_json([item.to_dict() for item in await result])


async def _pull(dispatcher: CommandDispatcher, args: argparse.Namespace) -> None:
    unsubscribe = dispatcher.hub.subscribe(
        dispatcher.pull_channel, lambda event: _print_json(event.to_dict())
    )
    try:
        await dispatcher.pull_image(args.image)
    finally:
        unsubscribe()


COMMANDS: Dict[str, Handler] = {
    "ps": lambda d, a: _listing(d.list_containers()),
    "images": lambda d, a: _listing(d.list_images()),
    "volumes": lambda d, a: _listing(d.list_volumes()),
    "networks": lambda d, a: _listing(d.list_networks()),
    "network-members": lambda d, a: _listing(d.list_network_members(a.network)),
    "logs": lambda d, a: d.emit_logs(a.container, _print_line),
    "run": lambda d, a: d.create_container(a.image, a.publish),
    "start": lambda d, a: d.start_container(a.container),
    "stop": lambda d, a: d.stop_container(a.container, a.time),
    "kill": lambda d, a: d.kill_container(a.container, a.signal),
    "rm": lambda d, a: d.delete_container(a.container),
    "pause": lambda d, a: d.pause_container(a.container),
    "unpause": lambda d, a: d.unpause_container(a.container),
    "rmi": lambda d, a: d.remove_image(a.image),
    "pull": _pull,
    "volume-create": lambda d, a: d.create_volume(a.name),
    "volume-rm": lambda d, a: d.remove_volume(a.name),
    "network-create": lambda d, a: d.create_network(a.name, a.driver),
    "network-rm": lambda d, a: d.remove_network(a.network),
    "network-connect": lambda d, a: d.connect_container_to_network(a.container, a.network),
    "network-disconnect": lambda d, a: d.disconnect_container_from_network(
        a.container, a.network
    ),
}


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dockdash", description="Manage containers, images, volumes and networks"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Mirror the log to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("ps", "List all containers"),
        ("images", "List images"),
        ("volumes", "List dangling volumes"),
        ("networks", "List networks"),
    ):
        subparsers.add_parser(name, help=help_text)

    for name, help_text in (
        ("logs", "Follow container logs"),
        ("start", "Start a container"),
        ("pause", "Pause a container"),
        ("unpause", "Unpause a container"),
        ("rm", "Force-remove a container with its volumes"),
    ):
        subparsers.add_parser(name, help=help_text).add_argument("container")

    stop = subparsers.add_parser("stop", help="Stop a container")
    stop.add_argument("container")
    stop.add_argument("--time", "-t", type=int, default=10, help="Grace period in seconds")

    kill = subparsers.add_parser("kill", help="Send a signal to a container")
    kill.add_argument("container")
    kill.add_argument("--signal", "-s", default="SIGKILL")

    run = subparsers.add_parser("run", help="Create and start a container")
    run.add_argument("image")
    run.add_argument("--publish", "-p", help="hostPort:containerPort")

    subparsers.add_parser("rmi", help="Force-remove an image").add_argument("image")
    subparsers.add_parser("pull", help="Pull an image").add_argument("image")

    subparsers.add_parser("volume-create", help="Create a volume").add_argument("name")
    subparsers.add_parser("volume-rm", help="Remove a volume").add_argument("name")

    network_create = subparsers.add_parser("network-create", help="Create a network")
    network_create.add_argument("name")
    network_create.add_argument("--driver", "-d", default=None)
    subparsers.add_parser("network-rm", help="Remove a network").add_argument("network")
    subparsers.add_parser(
        "network-members", help="List containers attached to a network"
    ).add_argument("network")
    for name, help_text in (
        ("network-connect", "Connect a container to a network"),
        ("network-disconnect", "Disconnect a container from a network"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("container")
        sub.add_argument("network")
    return parser


async def run_command(plane: ControlPlane, args: argparse.Namespace) -> int:
    """Выполняет одну команду; ошибки фасада печатаются в stderr как JSON."""

    handler = COMMANDS[args.command]
    try:
        await handler(plane.dispatcher, args)
    except FacadeError as exc:
        _print_error(exc)
        return EXIT_COMMAND_FAILED
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Готовит окружение, подключается к демону и выполняет команду."""

    args = create_parser().parse_args(argv)
    base_dir = resolve_workspace()
    if not initialize_workdir(base_dir):
        return EXIT_STARTUP_FAILED

    try:
        settings = initialize_settings(base_dir / "config.json")
    except SettingsError as exc:
        _print_error(exc)
        return EXIT_STARTUP_FAILED
    setup_logging_from_settings(base_dir, settings, console=args.verbose)

    try:
        plane = create_application(settings)
    except ConnectionSetupError as exc:
        _print_error(exc)
        return EXIT_STARTUP_FAILED

    LOGGER.info("dockdash %s: running '%s'", __version__, args.command)
    try:
        return asyncio.run(run_command(plane, args))
    except KeyboardInterrupt:
        return EXIT_OK
    finally:
        plane.close()


if __name__ == "__main__":
    sys.exit(main())
