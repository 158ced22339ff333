"""Live host introspection on macOS using PyObjC"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import PlatformLimits
from .devices import native_display_geometry
from .host import DEFAULT_COMPUTER_NAME, HostCapabilities, HostDisplay, HostIntrospectionError, NetworkInterface
from .models import VirtualizationSupport

# PyObjC imports for AppKit, Foundation and Apple's Virtualization Framework
import objc
from AppKit import NSDeviceResolution, NSDeviceSize, NSScreen
from Foundation import NSProcessInfo
from Security import SecTaskCopyValueForEntitlement, SecTaskCreateFromSelf
from SystemConfiguration import SCDynamicStoreCopyComputerName
from Virtualization import (
    VZBridgedNetworkInterface,
    VZMacGraphicsDisplayConfiguration,
    VZVirtualMachineConfiguration,
)

logger = logging.getLogger(__name__)


def _first(value):
    # PyObjC returns (result, out-parameter) tuples for functions with out-parameters
    return value[0] if isinstance(value, tuple) else value


def computer_name() -> str:
    name = _first(SCDynamicStoreCopyComputerName(None, None))
    return str(name) if name else DEFAULT_COMPUTER_NAME


def main_display() -> Optional[HostDisplay]:
    screen = NSScreen.mainScreen()
    if screen is None:
        return None

    description = screen.deviceDescription()
    resolution = description.get(NSDeviceResolution)
    size = description.get(NSDeviceSize)
    if resolution is None or size is None:
        logger.warning("Main screen has no size or resolution in its device description")
        return None

    size = size.sizeValue()
    resolution = resolution.sizeValue()
    top_inset = float(screen.safeAreaInsets().top)

    return HostDisplay(
        size_points=(float(size.width), float(size.height)),
        backing_scale_factor=float(screen.backingScaleFactor()),
        top_safe_area_inset=top_inset,
        device_resolution_dpi=(float(resolution.width), float(resolution.height)),
        has_notch=top_inset > 0,
        localized_name=str(screen.localizedName()),
    )


def detect_host() -> HostCapabilities:
    """Take a snapshot of the running Mac"""
    try:
        process_info = NSProcessInfo.processInfo()
        host = HostCapabilities(
            logical_processor_count=int(process_info.processorCount()),
            physical_memory_bytes=int(process_info.physicalMemory()),
            active_display=main_display(),
            computer_name=computer_name(),
        )
    except objc.error as e:
        raise HostIntrospectionError(f"Failed to query host: {e}") from e

    logger.info(f"Host snapshot: {host.logical_processor_count} processors, "
                f"{host.physical_memory_bytes} bytes memory, display {'present' if host.active_display else 'absent'}")
    return host


def detect_platform_limits() -> PlatformLimits:
    """Read the hypervisor's CPU and memory bounds"""
    return PlatformLimits(
        minimum_cpu_count=int(VZVirtualMachineConfiguration.minimumAllowedCPUCount()),
        maximum_cpu_count=int(VZVirtualMachineConfiguration.maximumAllowedCPUCount()),
        minimum_memory_bytes=int(VZVirtualMachineConfiguration.minimumAllowedMemorySize()),
        maximum_memory_bytes=int(VZVirtualMachineConfiguration.maximumAllowedMemorySize()),
    )


def vz_display_geometry(display: HostDisplay) -> tuple[int, int, int]:
    """Let Virtualization compute a display that fits the main screen"""
    screen = NSScreen.mainScreen()
    if screen is None:
        logger.warning("Main screen went away, sizing display from the snapshot")
        return native_display_geometry(display)
    reference = VZMacGraphicsDisplayConfiguration.alloc().initForScreen_sizeInPoints_(
        screen, display.size_points
    )
    return int(reference.widthInPixels()), int(reference.heightInPixels()), int(reference.pixelsPerInch())


class VZBridgedInterfaceProvider:
    """Bridgeable interfaces as reported by Virtualization"""

    def network_interfaces(self) -> Sequence[NetworkInterface]:
        interfaces = VZBridgedNetworkInterface.networkInterfaces() or []
        return [
            NetworkInterface(
                identifier=str(interface.identifier()),
                localized_display_name=(
                    str(interface.localizedDisplayName()) if interface.localizedDisplayName() else None
                ),
            )
            for interface in interfaces
        ]


class ProcessEntitlements:
    """Entitlements of the running process, read through the Security framework"""

    def __init__(self) -> None:
        self._task = SecTaskCreateFromSelf(None)

    def has(self, name: str) -> bool:
        if self._task is None:
            return False
        value = _first(SecTaskCopyValueForEntitlement(self._task, name, None))
        return bool(value)


def check_virtualization_support() -> VirtualizationSupport:
    """Check if the system supports virtualization"""
    try:
        # Check if we can create a basic configuration
        VZVirtualMachineConfiguration.alloc().init()

        return VirtualizationSupport(
            supported=True,
            framework_available=True,
            pyobjc_version=objc.__version__,
            message="Virtualization framework is available"
        )
    except objc.error as e:
        return VirtualizationSupport(
            supported=False,
            framework_available=True,
            error=str(e),
            message="Error checking virtualization support"
        )
