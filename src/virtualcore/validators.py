"""Validation helpers and soft checks for VM hardware configuration"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from .config import NETWORKING_ENTITLEMENT
from .host import AppEntitlements, NetworkInterfaceProvider
from .models import (
    BridgeInterface,
    CompatibilityInfo,
    MacHardwareDevice,
    PointingKind,
    VBMacConfiguration,
)
from .ranges import HardwareRanges

logger = logging.getLogger(__name__)

# Six hex octets sharing a single ':' or '-' separator
_MAC_PATTERN = re.compile(r"[0-9A-Fa-f]{2}([:-])(?:[0-9A-Fa-f]{2}\1){4}[0-9A-Fa-f]{2}")
_VERSION_PATTERN = re.compile(r"\d+(?:\.\d+)*")

TRACKPAD_MINIMUM_GUEST_VERSION: tuple[int, ...] = (13,)
TRACKPAD_WARNING: str = "Trackpad is only recognized by VMs running macOS 13 and later."

GuestVersion = Union[str, tuple[int, ...], None]


def validate_mac(address: str) -> bool:
    """Check MAC address syntax without normalizing it"""
    return isinstance(address, str) and _MAC_PATTERN.fullmatch(address) is not None


def is_locally_administered_mac(address: str) -> bool:
    """True for a well-formed unicast MAC with the locally administered bit set"""
    if not validate_mac(address):
        return False
    first_octet = int(address[:2], 16)
    return bool(first_octet & 0x02) and not first_octet & 0x01


def supports_bridged_networking(entitlements: AppEntitlements) -> bool:
    return entitlements.has(NETWORKING_ENTITLEMENT)


def bridge_interfaces(provider: NetworkInterfaceProvider) -> list[BridgeInterface]:
    """Map provider records to choices, naming unnamed interfaces by identifier"""
    return [
        BridgeInterface(id=interface.identifier, name=interface.localized_display_name or interface.identifier)
        for interface in provider.network_interfaces()
    ]


def default_bridge_interface_id(provider: NetworkInterfaceProvider) -> Optional[str]:
    interfaces = provider.network_interfaces()
    if not interfaces:
        return None
    return interfaces[0].identifier


def _parse_version(version: str | tuple[int, ...]) -> Optional[tuple[int, ...]]:
    """First dotted number in the text, e.g. (12, 6) for "macOS 12.6"; None when there is none"""
    if isinstance(version, tuple):
        return version or None
    match = _VERSION_PATTERN.search(str(version))
    if match is None:
        return None
    return tuple(int(part) for part in match.group().split("."))


def compatibility_info(kind: PointingKind, guest_os_version: GuestVersion = None) -> CompatibilityInfo:
    """
    Decide whether a pointing device kind works with a guest

    Args:
        kind: Pointing device kind
        guest_os_version: Guest macOS version such as "12.6" or (13, 1); None when unknown

    Returns:
        CompatibilityInfo; an unsupported kind is still allowed, it only carries a warning
    """
    if kind is PointingKind.MOUSE:
        return CompatibilityInfo(supported=True)

    if guest_os_version is None:
        # Unknown guests are not blocked but still get the hint
        return CompatibilityInfo(supported=True, warning=TRACKPAD_WARNING)

    version = _parse_version(guest_os_version)
    if version is not None and version >= TRACKPAD_MINIMUM_GUEST_VERSION:
        return CompatibilityInfo(supported=True)
    return CompatibilityInfo(supported=False, warning=TRACKPAD_WARNING)


def hardware_issues(hardware: MacHardwareDevice, ranges: HardwareRanges) -> list[str]:
    """List every rule the hardware set breaks; an empty list means well-formed"""
    issues: list[str] = []

    if hardware.cpu_count not in ranges.cpu_count:
        issues.append(f"CPU count {hardware.cpu_count} is outside {ranges.cpu_count}")

    if hardware.memory_size_gb not in ranges.memory_size_gb:
        issues.append(f"Memory size {hardware.memory_size_gb} GB is outside {ranges.memory_size_gb} GB")

    if not hardware.display_devices:
        issues.append("At least one display is required")

    for index, display in enumerate(hardware.display_devices):
        if display.width not in ranges.display_width:
            issues.append(f"Display {index} width {display.width} is outside {ranges.display_width}")
        if display.height not in ranges.display_height:
            issues.append(f"Display {index} height {display.height} is outside {ranges.display_height}")
        if display.pixels_per_inch not in ranges.display_ppi:
            issues.append(f"Display {index} PPI {display.pixels_per_inch} is outside {ranges.display_ppi}")

    for index, device in enumerate(hardware.network_devices):
        if not validate_mac(device.mac_address):
            issues.append(f"Network device {index} has an invalid MAC address: {device.mac_address!r}")
        elif not is_locally_administered_mac(device.mac_address):
            issues.append(f"Network device {index} MAC address {device.mac_address} is not locally administered")

    return issues


def configuration_issues(configuration: VBMacConfiguration, ranges: HardwareRanges) -> list[str]:
    issues = hardware_issues(configuration.hardware, ranges)
    if issues:
        logger.info(f"Configuration has {len(issues)} issue(s)")
    return issues


def configuration_warnings(configuration: VBMacConfiguration, guest_os_version: GuestVersion = None) -> list[str]:
    """Non-blocking notes about the configuration for the given guest; never makes it invalid"""
    warnings: list[str] = []
    info = compatibility_info(configuration.hardware.pointing_device.kind, guest_os_version)
    if info.warning is not None:
        warnings.append(info.warning)
    return warnings
