"""Command Line Interface for VirtualCore hardware configuration"""

from __future__ import annotations

import click
import logging
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape
import sys
from pathlib import Path
from typing import Optional

from .config import DisplayLimits
from .devices import DefaultDeviceFactory
from .host import AppEntitlements, HostCapabilities, HostIntrospectionError, HostSnapshot, NetworkInterfaceProvider
from .models import VBMacConfiguration, VirtualizationSupport
from .presets import DisplayPresetCatalog
from .ranges import HardwareRanges, RangeResolver
from .validators import (
    bridge_interfaces,
    configuration_issues,
    configuration_warnings,
    supports_bridged_networking,
    validate_mac,
)

console: Console = Console()


class HostEnvironment:
    """Host, collaborators and resolver for one CLI invocation"""

    def __init__(self, host_file: Optional[str], display: DisplayLimits) -> None:
        self.host_file = host_file
        self.display = display
        self._loaded = False

    def load(self) -> None:
        if self._loaded:
            return
        if self.host_file:
            snapshot = HostSnapshot.from_json(Path(self.host_file).read_text())
            self._host = snapshot.host
            self._interfaces: NetworkInterfaceProvider = snapshot.interface_provider()
            self._entitlements: AppEntitlements = snapshot.app_entitlements()
            self.resolver = RangeResolver(display=self.display)
            self.factory = DefaultDeviceFactory(self.resolver)
        else:
            from . import host_macos

            self._host = host_macos.detect_host()
            self._interfaces = host_macos.VZBridgedInterfaceProvider()
            self._entitlements = host_macos.ProcessEntitlements()
            self.resolver = RangeResolver(host_macos.detect_platform_limits(), self.display)
            self.factory = DefaultDeviceFactory(self.resolver, geometry=host_macos.vz_display_geometry)
        self._loaded = True

    @property
    def host(self) -> HostCapabilities:
        self.load()
        return self._host

    @property
    def interfaces(self) -> NetworkInterfaceProvider:
        self.load()
        return self._interfaces

    @property
    def entitlements(self) -> AppEntitlements:
        self.load()
        return self._entitlements

    def ranges(self) -> HardwareRanges:
        self.load()
        return self.resolver.resolve(self._host)


def _environment(ctx: click.Context) -> HostEnvironment:
    env: HostEnvironment = ctx.obj
    try:
        env.load()
    except ImportError as e:
        console.print(f"[red]Error:[/red] Live host introspection needs macOS with PyObjC ({escape(str(e))}). "
                      "Pass --host-file with a host snapshot instead.")
        sys.exit(1)
    except HostIntrospectionError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        sys.exit(1)
    except (OSError, ValueError) as e:
        console.print(f"[red]❌ Failed to load host snapshot:[/red] {escape(str(e))}")
        sys.exit(1)
    return env


def _ranges_table(ranges: HardwareRanges) -> Table:
    table: Table = Table(title="Hardware Ranges")
    table.add_column("Property", style="cyan")
    table.add_column("Range", style="green")

    table.add_row("CPU Count", str(ranges.cpu_count))
    table.add_row("Memory (GB)", str(ranges.memory_size_gb))
    table.add_row("Display Width", str(ranges.display_width))
    table.add_row("Display Height", str(ranges.display_height))
    table.add_row("Display PPI", str(ranges.display_ppi))
    return table


@click.group()
@click.version_option(package_name="virtualcore")
@click.option("--host-file", type=click.Path(dir_okay=False), help="JSON host snapshot to use instead of this Mac")
@click.option("--max-display-width", type=click.IntRange(min=1), default=DisplayLimits().maximum_width, show_default=True,
              envvar="VIRTUALCORE_MAX_DISPLAY_WIDTH", help="Largest display width offered")
@click.option("--max-display-height", type=click.IntRange(min=1), default=DisplayLimits().maximum_height, show_default=True,
              envvar="VIRTUALCORE_MAX_DISPLAY_HEIGHT", help="Largest display height offered")
@click.option("--verbose", "-v", is_flag=True, help="Log derivation details")
@click.pass_context
def cli(ctx: click.Context, host_file: Optional[str], max_display_width: int, max_display_height: int,
        verbose: bool) -> None:
    """VirtualCore - derive VM hardware ranges, defaults and display presets from the host"""
    if verbose:
        logging.getLogger("virtualcore").setLevel(logging.DEBUG)
    display = DisplayLimits(maximum_width=max_display_width, maximum_height=max_display_height)
    ctx.obj = HostEnvironment(host_file, display)


@cli.command()
def check() -> None:
    """Check if virtualization is supported on this system"""
    console.print("\n[bold blue]Checking Virtualization Support...[/bold blue]")

    try:
        from .host_macos import check_virtualization_support
        support_info: VirtualizationSupport = check_virtualization_support()
    except ImportError as e:
        support_info = VirtualizationSupport(
            supported=False,
            framework_available=False,
            error=str(e),
            message="Virtualization framework not available"
        )

    if support_info.supported:
        console.print(Panel(
            f"✅ {support_info.message}\nPyObjC Version: {support_info.pyobjc_version or 'Unknown'}",
            title="[green]Virtualization Supported[/green]",
            border_style="green"
        ))
    else:
        console.print(Panel(
            f"❌ {support_info.message}\nError: {support_info.error or 'Unknown error'}",
            title="[red]Virtualization Not Supported[/red]",
            border_style="red"
        ))
        sys.exit(1)


@cli.command()
@click.pass_context
def host(ctx: click.Context) -> None:
    """Show the host snapshot and the hardware ranges it allows"""
    env = _environment(ctx)
    snapshot: HostCapabilities = env.host

    table: Table = Table(title=f"Host: {snapshot.host_name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Processors", str(snapshot.logical_processor_count))
    table.add_row("Memory", f"{snapshot.physical_memory_bytes / 1024 ** 3:.1f} GB")
    display = snapshot.active_display
    if display is None:
        table.add_row("Display", "None")
    else:
        table.add_row("Display", snapshot.main_display_name)
        table.add_row("Size (points)", f"{display.size_points[0]:g}x{display.size_points[1]:g}")
        table.add_row("Scale", f"{display.backing_scale_factor:g}x")
        table.add_row("Notch", "Yes" if display.has_notch else "No")

    console.print(table)
    console.print(_ranges_table(env.ranges()))


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the configuration as JSON")
@click.pass_context
def defaults(ctx: click.Context, as_json: bool) -> None:
    """Show the default configuration for the host"""
    env = _environment(ctx)
    configuration: VBMacConfiguration = env.factory.default_configuration(env.host)

    if as_json:
        click.echo(configuration.to_json(indent=2))
        return

    hardware = configuration.hardware
    table: Table = Table(title="Default Configuration")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("CPU Count", str(hardware.cpu_count))
    table.add_row("Memory", f"{hardware.memory_size / 1024 ** 3:.1f} GB")
    table.add_row("Pointing Device", hardware.pointing_device.kind.display_name)
    for display in hardware.display_devices:
        table.add_row("Display", f"{display.name} ({display.resolution_label})")
    for device in hardware.network_devices:
        table.add_row("Network", f"{device.kind.display_name} {device.mac_address}")
    for sound in hardware.sound_devices:
        table.add_row("Sound", f"output={'on' if sound.enable_output else 'off'} "
                               f"input={'on' if sound.enable_input else 'off'}")

    console.print(table)


@cli.command()
@click.option("--all", "show_all", is_flag=True, help="Include presets that do not apply to this host")
@click.pass_context
def presets(ctx: click.Context, show_all: bool) -> None:
    """List display presets"""
    env = _environment(ctx)
    catalog = DisplayPresetCatalog(env.factory)
    items = catalog.presets(env.host) if show_all else catalog.available_presets(env.host)

    table: Table = Table(title="Display Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Resolution", style="green")
    table.add_column("Available")
    table.add_column("Warning", style="yellow")

    for preset in items:
        table.add_row(
            preset.name,
            preset.device.resolution_label,
            "Yes" if preset.is_available else "No",
            preset.warning or ""
        )

    console.print(table)


@cli.command(name="validate-mac")
@click.argument("address")
def validate_mac_command(address: str) -> None:
    """Check a MAC address"""
    if validate_mac(address):
        console.print(f"[green]✅ {address} is a valid MAC address[/green]")
    else:
        console.print(f"[red]❌ {address} is not a valid MAC address[/red]")
        sys.exit(1)


@cli.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--guest-version", help="Guest macOS version, e.g. 12.6, for compatibility warnings")
@click.pass_context
def validate(ctx: click.Context, config_file: str, guest_version: Optional[str]) -> None:
    """Check a JSON configuration against the host's ranges"""
    env = _environment(ctx)

    try:
        configuration = VBMacConfiguration.from_json(Path(config_file).read_text())
    except (OSError, ValueError) as e:
        console.print(f"[red]❌ Failed to load configuration:[/red] {escape(str(e))}")
        sys.exit(1)

    for warning in configuration_warnings(configuration, guest_version):
        console.print(f"[yellow]⚠️  {escape(warning)}[/yellow]")

    issues = configuration_issues(configuration, env.ranges())
    if not issues:
        console.print(f"[green]✅ {config_file} is valid for this host[/green]")
        return

    for issue in issues:
        console.print(f"  • {escape(issue)}")
    console.print(f"[red]❌ {len(issues)} issue(s) found[/red]")
    sys.exit(1)


@cli.command()
@click.pass_context
def bridges(ctx: click.Context) -> None:
    """List host interfaces available for bridged networking"""
    env = _environment(ctx)

    if not supports_bridged_networking(env.entitlements):
        console.print("[yellow]⚠️  This app is not entitled to use bridged networking[/yellow]")

    interfaces = bridge_interfaces(env.interfaces)
    if not interfaces:
        console.print("[yellow]No bridgeable interfaces found.[/yellow]")
        return

    table: Table = Table(title="Bridge Interfaces")
    table.add_column("Identifier", style="cyan")
    table.add_column("Name", style="green")
    for interface in interfaces:
        table.add_row(interface.id, interface.name)

    console.print(table)


if __name__ == "__main__":
    cli()
