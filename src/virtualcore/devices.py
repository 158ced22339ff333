"""Default VM hardware derived from host capabilities"""

from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from .host import HostCapabilities, HostDisplay, NetworkInterfaceProvider
from .models import (
    DisplayDevice,
    MacHardwareDevice,
    NetworkDevice,
    NetworkKind,
    PointingDevice,
    PointingKind,
    SoundDevice,
    VBMacConfiguration,
)
from .ranges import RangeResolver
from .validators import default_bridge_interface_id

logger = logging.getLogger(__name__)

# Maps a host display to (width in pixels, height in pixels, pixels per inch)
DisplayGeometry = Callable[[HostDisplay], tuple[int, int, int]]

_system_random = random.SystemRandom()


def generate_mac_address(rng: Optional[random.Random] = None) -> str:
    """Random locally administered unicast MAC, upper-case and colon separated"""
    rng = rng or _system_random
    octets = [rng.randrange(256) for _ in range(6)]
    # Set the locally administered bit, clear the multicast bit
    octets[0] = (octets[0] | 0x02) & 0xFE
    return ":".join(f"{octet:02X}" for octet in octets)


def native_display_geometry(display: HostDisplay) -> tuple[int, int, int]:
    """Full panel at native scale, including any area behind a notch"""
    width, height = display.size_points
    return (
        int(width * display.backing_scale_factor),
        int(height * display.backing_scale_factor),
        int(display.device_resolution_dpi[0]),
    )


class DefaultDeviceFactory:
    """Builds host-appropriate default devices and configurations"""

    def __init__(self,
                 resolver: Optional[RangeResolver] = None,
                 rng: Optional[random.Random] = None,
                 geometry: Optional[DisplayGeometry] = None) -> None:
        self.resolver: RangeResolver = resolver or RangeResolver()
        self.rng: Optional[random.Random] = rng
        self.geometry: DisplayGeometry = geometry or native_display_geometry

    @staticmethod
    def fallback_display() -> DisplayDevice:
        return DisplayDevice()

    def match_host_display(self, host: HostCapabilities) -> DisplayDevice:
        """
        Display matching the usable area of the host's main display

        The top safe-area inset is removed from the height so that a notched
        panel yields the area below the camera housing.
        """
        display = host.active_display
        if display is None:
            logger.warning("No active host display, using fallback display")
            return self.fallback_display()

        width, height = display.size_points
        point_height = height - display.top_safe_area_inset

        return DisplayDevice(
            name=host.host_name,
            width=int(width * display.backing_scale_factor),
            height=int(point_height * display.backing_scale_factor),
            pixels_per_inch=int(display.device_resolution_dpi[0]),
        )

    def size_to_fit_display(self, host: HostCapabilities) -> DisplayDevice:
        """Display sized to fit the host's main display, as computed by the geometry query"""
        display = host.active_display
        if display is None:
            logger.warning("No active host display, using fallback display")
            return self.fallback_display()

        width, height, ppi = self.geometry(display)
        return DisplayDevice(
            name=host.host_name,
            width=width,
            height=height,
            pixels_per_inch=ppi,
        )

    def default_network_device(self) -> NetworkDevice:
        return NetworkDevice(kind=NetworkKind.NAT, mac_address=generate_mac_address(self.rng))

    def bridged_network_device(self, provider: NetworkInterfaceProvider) -> Optional[NetworkDevice]:
        """NAT default switched to bridging on the host's first interface, if there is one"""
        interface_id = default_bridge_interface_id(provider)
        if interface_id is None:
            logger.info("No bridgeable host interface available")
            return None
        return NetworkDevice(
            kind=NetworkKind.BRIDGE,
            mac_address=generate_mac_address(self.rng),
            bridge_interface_id=interface_id,
        )

    @staticmethod
    def default_pointing_device() -> PointingDevice:
        return PointingDevice(kind=PointingKind.MOUSE)

    @staticmethod
    def default_sound_device() -> SoundDevice:
        return SoundDevice(enable_output=True, enable_input=True)

    def suggested_cpu_count(self, host: HostCapabilities) -> int:
        available = host.logical_processor_count
        cpu_count = 1 if available <= 1 else available // 2
        return self.resolver.cpu_range(host).clamp(cpu_count)

    def suggested_memory_size(self, host: HostCapabilities) -> int:
        """Half of host memory, clamped in bytes to the platform bounds"""
        return self.resolver.memory_bytes_bounds().clamp(host.physical_memory_bytes // 2)

    def default_hardware(self, host: HostCapabilities) -> MacHardwareDevice:
        hardware = MacHardwareDevice(
            cpu_count=self.suggested_cpu_count(host),
            memory_size=self.suggested_memory_size(host),
            pointing_device=self.default_pointing_device(),
            display_devices=(self.match_host_display(host),),
            network_devices=(self.default_network_device(),),
            sound_devices=(self.default_sound_device(),),
        )
        logger.info(
            f"Default hardware: {hardware.cpu_count} CPUs, {hardware.memory_size_gb} GB memory, "
            f"display {hardware.display_devices[0].resolution_label}"
        )
        return hardware

    def default_configuration(self, host: HostCapabilities) -> VBMacConfiguration:
        return VBMacConfiguration(hardware=self.default_hardware(host), shared_folders=())
