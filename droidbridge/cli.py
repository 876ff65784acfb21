"""Command Line Interface for droidbridge."""

import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .adb import (
    ADBClient,
    ADBDevice,
    ADBError,
    Fastboot,
    FileTransfer,
    PackageManager,
    PackageType,
    ShellCommand,
    create_transfer_progress_bar,
    list_devices,
    run_batch,
)
from .adb.models import CommandResult
from .adb.transfer import progress_bar_callback
from .apps import AppExtractor, LabelFetcher
from .config import DEFAULT_CONFIG_PATH, BridgeConfig, load_config, save_config, set_config
from .util import format_size, get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


class AppContext:
    """Objects shared by all commands."""

    def __init__(self, config: BridgeConfig, config_path: Path):
        self.config = config
        self.config_path = config_path
        self.client = ADBClient.from_config(config)

    def device(self, serial: Optional[str]) -> ADBDevice:
        """Select a device; an explicit serial is remembered for later runs."""
        if serial and serial != self.config.last_device:
            self.config.last_device = serial
            save_config(self.config, self.config_path)
        return ADBDevice(serial or self.config.last_device or "", self.client)


pass_app = click.make_pass_decorator(AppContext)


def _report(result: CommandResult, title: str = "") -> None:
    """Print raw tool output and the error, if any."""
    if result.output.strip():
        console.print(result.output.rstrip(), markup=False, highlight=False)
    if result.error is not None:
        console.print(f"[red]{title + ': ' if title else ''}{escape(str(result.error))}[/red]")


def _fail_on_error(result: CommandResult, title: str) -> None:
    if result.error is not None:
        _report(result, title)
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--trace", is_flag=True, help="Show every adb/fastboot command that runs")
@click.option("--config", "-c", "config_path", type=click.Path(path_type=Path), help="Configuration file path")
@click.pass_context
def cli(ctx, verbose: bool, trace: bool, config_path: Optional[Path]):
    """droidbridge - control Android devices through adb and fastboot."""
    config_path = config_path or DEFAULT_CONFIG_PATH
    config = load_config(config_path)
    set_config(config)
    setup_logging(
        level="DEBUG" if verbose else config.log_level,
        log_file=Path(config.log_file).expanduser() if config.log_file else None,
        trace_commands=trace or config.trace_commands,
    )

    ctx.obj = AppContext(config, config_path)
    if not ctx.obj.client.is_available():
        logger.warning("adb not found; set it with 'droidbridge config set-adb-path'")


@cli.command("devices")
@pass_app
def devices_cmd(app_ctx: AppContext):
    """List devices in adb and fastboot mode."""
    result = list_devices(app_ctx.client)
    devices = result.value or {}
    if result.error is not None and not devices:
        _report(result, "ADB Error")
        sys.exit(1)

    if not devices:
        console.print("[yellow]No devices found[/yellow]")
        return

    table = Table(title="Connected Devices")
    table.add_column("Serial", style="cyan")
    table.add_column("State", style="green")
    table.add_column("Model", style="white")
    table.add_column("Product", style="white")
    table.add_column("Transport", style="white")

    for serial in sorted(devices):
        info = devices[serial]
        table.add_row(info.serial, info.state_text or info.state.value, info.model, info.product, info.transport_id)

    console.print(table)


@cli.command("users")
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def users_cmd(app_ctx: AppContext, serial: Optional[str]):
    """List user profiles on a device."""
    result = PackageManager(app_ctx.device(serial)).list_users()
    _fail_on_error(result, "ADB Error")

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("State", style="green")
    for user in result.value:
        table.add_row(str(user.id), user.name, user.state)
    console.print(table)


@cli.command("packages")
@click.option("--serial", "-s", help="Device serial number")
@click.option("--user", "-u", "user_id", type=int, help="User profile id")
@click.option("--type", "-t", "package_type", type=click.Choice([t.value for t in PackageType]), default="all")
@click.option("--labels", is_flag=True, help="Look up app labels (slow, limited per run)")
@pass_app
def packages_cmd(app_ctx: AppContext, serial: Optional[str], user_id: Optional[int], package_type: str, labels: bool):
    """List installed packages."""
    manager = PackageManager(app_ctx.device(serial))
    result = manager.list_packages(user_id=user_id, package_type=PackageType(package_type))
    _fail_on_error(result, "ADB Error")

    names = {}
    if labels:
        fetcher = LabelFetcher(
            manager,
            max_count=app_ctx.config.labels.max_count,
            delay=app_ctx.config.labels.delay_seconds,
        )
        with console.status("Fetching app labels..."):
            fetcher.start(result.value)
            fetcher.wait()
        names = fetcher.labels

    table = Table(title=f"Installed Packages ({package_type}, {len(result.value)})")
    table.add_column("Package", style="cyan")
    table.add_column("Label", style="white")
    for package in sorted(result.value):
        table.add_row(package, names.get(package, ""))
    console.print(table)


@cli.command("props")
@click.option("--serial", "-s", help="Device serial number")
@click.option("--filter", "-f", "text_filter", default="", help="Only show keys containing this text")
@pass_app
def props_cmd(app_ctx: AppContext, serial: Optional[str], text_filter: str):
    """Show system properties."""
    result = ShellCommand(app_ctx.device(serial)).get_properties()
    _fail_on_error(result, "ADB Error")

    table = Table(title="System Properties")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key in sorted(result.value):
        if text_filter in key:
            table.add_row(key, result.value[key])
    console.print(table)


@cli.command("getvar")
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def getvar_cmd(app_ctx: AppContext, serial: Optional[str]):
    """Show boot loader variables (device in fastboot mode)."""
    result = Fastboot(app_ctx.device(serial)).getvar_all()
    _fail_on_error(result, "Fastboot Error")

    table = Table(title="Boot Loader Variables")
    table.add_column("Variable", style="cyan")
    table.add_column("Value", style="white")
    for key in sorted(result.value):
        table.add_row(key, result.value[key])
    console.print(table)


@cli.command("ls")
@click.argument("path", default="/sdcard")
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def ls_cmd(app_ctx: AppContext, path: str, serial: Optional[str]):
    """List a directory on the device."""
    result = ShellCommand(app_ctx.device(serial)).list_directory(path)
    _fail_on_error(result, "ADB Error")

    table = Table(title=path)
    table.add_column("Name", style="cyan")
    table.add_column("Size", style="white", justify="right")
    table.add_column("Mode", style="white")
    table.add_column("Modified", style="white")
    for entry in sorted(result.value, key=lambda e: e.sort_key()):
        name = entry.name + ("/" if entry.is_dir else "")
        size = "" if entry.is_dir else format_size(entry.size)
        table.add_row(name, size, entry.mode, entry.mod_time)
    console.print(table)


@cli.command("pull")
@click.argument("remote_paths", nargs=-1, required=True)
@click.option("--serial", "-s", help="Device serial number")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=Path("."), help="Local directory")
@click.option("--no-preserve", is_flag=True, help="Do not keep timestamps and modes")
@pass_app
def pull_cmd(app_ctx: AppContext, remote_paths: List[str], serial: Optional[str], output: Path, no_preserve: bool):
    """Pull files or directories from the device."""
    transfer = FileTransfer(app_ctx.device(serial), delay=app_ctx.config.batch_delay_seconds)
    with create_transfer_progress_bar(len(remote_paths), desc="Pulling") as bar:
        result = transfer.pull_many(
            list(remote_paths), output, preserve=not no_preserve, progress_callback=progress_bar_callback(bar)
        )
    _print_batch(result, "Pull")


@cli.command("push")
@click.argument("local_paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.argument("remote_dir")
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def push_cmd(app_ctx: AppContext, local_paths: List[Path], remote_dir: str, serial: Optional[str]):
    """Push local files into a directory on the device."""
    transfer = FileTransfer(app_ctx.device(serial), delay=app_ctx.config.batch_delay_seconds)
    with create_transfer_progress_bar(len(local_paths), desc="Pushing") as bar:
        result = transfer.push_many(list(local_paths), remote_dir, progress_callback=progress_bar_callback(bar))
    _print_batch(result, "Push")


def _print_batch(result: CommandResult, title: str) -> None:
    if result.value is None:
        _report(result, title)
        sys.exit(1)
    batch = result.value
    colour = "green" if batch.failed == 0 else "yellow"
    console.print(f"[{colour}]{escape(batch.summary(title))}[/{colour}]", highlight=False)
    if batch.failed:
        sys.exit(1)


@cli.group()
def app():
    """Application management commands."""
    pass


def _package_batch(app_ctx: AppContext, packages: List[str], title: str, operation) -> None:
    result = run_batch(list(packages), operation, delay=app_ctx.config.batch_delay_seconds)
    _print_batch(CommandResult(value=result, output=result.output, error=result.first_error), title)


@app.command("install")
@click.argument("apk_path", type=click.Path(exists=True, path_type=Path))
@click.option("--serial", "-s", help="Device serial number")
@click.option("--user", "-u", "user_id", type=int, help="User profile id")
@pass_app
def app_install(app_ctx: AppContext, apk_path: Path, serial: Optional[str], user_id: Optional[int]):
    """Install an APK."""
    result = PackageManager(app_ctx.device(serial)).install(str(apk_path), user_id=user_id)
    _report(result, "Install failed")
    if result.error is not None:
        sys.exit(1)


@app.command("uninstall")
@click.argument("packages", nargs=-1, required=True)
@click.option("--serial", "-s", help="Device serial number")
@click.option("--user", "-u", "user_id", type=int, default=0, show_default=True, help="User profile id")
@pass_app
def app_uninstall(app_ctx: AppContext, packages: List[str], serial: Optional[str], user_id: int):
    """Uninstall packages for a user."""
    manager = PackageManager(app_ctx.device(serial))
    _package_batch(app_ctx, packages, "Uninstall", lambda p: manager.uninstall(p, user_id))


@app.command("clear")
@click.argument("packages", nargs=-1, required=True)
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def app_clear(app_ctx: AppContext, packages: List[str], serial: Optional[str]):
    """Clear app data."""
    manager = PackageManager(app_ctx.device(serial))
    _package_batch(app_ctx, packages, "Clear data", manager.clear_data)


@app.command("stop")
@click.argument("packages", nargs=-1, required=True)
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def app_stop(app_ctx: AppContext, packages: List[str], serial: Optional[str]):
    """Force-stop apps."""
    manager = PackageManager(app_ctx.device(serial))
    _package_batch(app_ctx, packages, "Force stop", manager.force_stop)


@app.command("label")
@click.argument("package")
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def app_label(app_ctx: AppContext, package: str, serial: Optional[str]):
    """Show the human-readable name of an app."""
    result = PackageManager(app_ctx.device(serial)).app_label(package)
    if result.value:
        console.print(result.value, markup=False)
    if result.error is not None:
        console.print(f"[yellow]{escape(str(result.error))}[/yellow]")


@app.command("extract")
@click.argument("packages", nargs=-1, required=True)
@click.option("--serial", "-s", help="Device serial number")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output directory")
@click.option("--apk-only", is_flag=True, help="Skip the app data archive")
@pass_app
def app_extract(app_ctx: AppContext, packages: List[str], serial: Optional[str], output: Optional[Path], apk_only: bool):
    """Extract APKs and, when possible, app data archives."""
    extractor = AppExtractor(app_ctx.device(serial))
    root = output or Path.cwd()

    def extract(package: str) -> CommandResult:
        dest = root / package
        if apk_only:
            return extractor.extract_apk(package, dest)
        return extractor.extract_all(package, dest)

    _package_batch(app_ctx, packages, "Extract", extract)


@cli.command("reboot")
@click.option("--serial", "-s", help="Device serial number")
@click.option("--mode", "-m", type=click.Choice(["", "recovery", "bootloader", "sideload"]), default="")
@pass_app
def reboot_cmd(app_ctx: AppContext, serial: Optional[str], mode: str):
    """Reboot the device."""
    result = app_ctx.device(serial).reboot(mode)
    _report(result, "Reboot failed")


@cli.command("sideload")
@click.argument("zip_path", type=click.Path(exists=True, path_type=Path))
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def sideload_cmd(app_ctx: AppContext, zip_path: Path, serial: Optional[str]):
    """Sideload an OTA package (device in sideload mode)."""
    result = app_ctx.device(serial).sideload(str(zip_path))
    _report(result, "Sideload failed")


@cli.command("fastboot", context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, required=True, type=click.UNPROCESSED)
@click.option("--serial", "-s", help="Device serial number")
@pass_app
def fastboot_cmd(app_ctx: AppContext, args: List[str], serial: Optional[str]):
    """Run a fastboot subcommand, e.g. `droidbridge fastboot oem device-info`."""
    result = Fastboot(app_ctx.device(serial)).run(*args)
    _report(result, "Fastboot Error")
    if result.error is not None:
        sys.exit(1)


@cli.group()
def config():
    """Configuration commands."""
    pass


@config.command("show")
@pass_app
def config_show(app_ctx: AppContext):
    """Show the effective configuration."""
    table = Table(title=f"Configuration ({app_ctx.config_path})")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("adb_path", app_ctx.client.adb_path)
    table.add_row("fastboot_path", app_ctx.client.fastboot_path or "(not found)")
    table.add_row("log_level", app_ctx.config.log_level)
    table.add_row("trace_commands", str(app_ctx.config.trace_commands))
    table.add_row("last_device", app_ctx.config.last_device or "")
    table.add_row("batch_delay_seconds", str(app_ctx.config.batch_delay_seconds))
    table.add_row("labels.max_count", str(app_ctx.config.labels.max_count))
    table.add_row("labels.delay_seconds", str(app_ctx.config.labels.delay_seconds))
    console.print(table)


@config.command("set-adb-path")
@click.argument("path")
@pass_app
def config_set_adb_path(app_ctx: AppContext, path: str):
    """Validate and save the adb location."""
    try:
        resolved = app_ctx.config.use_adb_path(path)
    except ADBError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    app_ctx.client.set_adb_path(resolved)
    save_config(app_ctx.config, app_ctx.config_path)
    console.print(f"[green]adb path set to {escape(resolved)}[/green]")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
