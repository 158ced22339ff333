"""Named display presets"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID, uuid5

from .devices import DefaultDeviceFactory
from .host import HostCapabilities
from .models import DisplayDevice, DisplayPreset

logger = logging.getLogger(__name__)

# Preset devices get stable identities so rebuilt catalogs compare equal
PRESET_NAMESPACE: UUID = UUID("5d6f3c1e-8a4b-4f4e-9c61-2b7a0e9d4c13")

HIDPI_WARNING: str = (
    "If things look small in the VM after boot, go to System Preferences "
    "and select a HiDPI scaled resolution for the display."
)


def _preset(name: str, device: DisplayDevice, warning: Optional[str] = None, is_available: bool = True) -> DisplayPreset:
    return DisplayPreset(
        name=name,
        device=device.model_copy(update={"id": uuid5(PRESET_NAMESPACE, name)}),
        warning=warning,
        is_available=is_available,
    )


class DisplayPresetCatalog:
    """Builds the display preset list for a host snapshot.

    Availability and names are fixed when the list is built; call
    ``presets`` again after the host changes.
    """

    def __init__(self, factory: Optional[DefaultDeviceFactory] = None) -> None:
        self.factory: DefaultDeviceFactory = factory or DefaultDeviceFactory()

    def presets(self, host: HostCapabilities) -> list[DisplayPreset]:
        display_name = host.main_display_name
        presets = [
            _preset("Full HD", DisplayDevice(name="1920x1080@144", width=1920, height=1080, pixels_per_inch=144)),
            _preset("4.5K Retina", DisplayDevice(name="4480x2520", width=4480, height=2520, pixels_per_inch=218)),
            # Only relevant for displays with a notch
            _preset(
                f'Match "{display_name}"',
                self.factory.match_host_display(host),
                warning=HIDPI_WARNING,
                is_available=host.main_display_has_notch,
            ),
            _preset(f'Size to fit in "{display_name}"', self.factory.size_to_fit_display(host)),
        ]
        logger.debug(f"Built {len(presets)} display presets for {display_name}")
        return presets

    def available_presets(self, host: HostCapabilities) -> list[DisplayPreset]:
        return [preset for preset in self.presets(host) if preset.is_available]
