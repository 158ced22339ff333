"""Host capability snapshots and the collaborator interfaces the core consumes"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_COMPUTER_NAME: str = "This Mac"


class HostIntrospectionError(Exception):
    """Raised when the live host cannot be queried"""


class HostDisplay(BaseModel):
    """Geometry of the host's active (main) display"""
    model_config = ConfigDict(frozen=True)

    size_points: tuple[float, float] = Field(..., description="Display size in points (width, height)")
    backing_scale_factor: float = Field(1.0, gt=0, description="Pixels per point")
    top_safe_area_inset: float = Field(0.0, ge=0, description="Points hidden by a notch-style cutout")
    device_resolution_dpi: tuple[float, float] = Field((72.0, 72.0), description="Device resolution (x, y) in DPI")
    has_notch: bool = Field(False, description="Whether the display has a camera housing cutout")
    localized_name: Optional[str] = Field(None, description="Name of the display as shown to the user")


class HostCapabilities(BaseModel):
    """Snapshot of the host, taken once when a configuration is created"""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    logical_processor_count: int = Field(..., ge=0, description="Number of logical processors")
    physical_memory_bytes: int = Field(..., ge=0, lt=2 ** 64, description="Physical memory in bytes")
    active_display: Optional[HostDisplay] = Field(None, description="Main display, if any is active")
    computer_name: str = Field(DEFAULT_COMPUTER_NAME, description="User-visible computer name")

    @property
    def host_name(self) -> str:
        return self.computer_name or DEFAULT_COMPUTER_NAME

    @property
    def main_display_name(self) -> str:
        """Display name used in preset titles, falling back to the computer name"""
        if self.active_display is None or not self.active_display.localized_name:
            return self.host_name
        return self.active_display.localized_name

    @property
    def main_display_has_notch(self) -> bool:
        return self.active_display is not None and self.active_display.has_notch


class NetworkInterface(BaseModel):
    """Record describing a host interface a VM network device can bridge to"""
    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1, description="BSD name of the interface")
    localized_display_name: Optional[str] = Field(None, description="User-visible interface name")


@runtime_checkable
class NetworkInterfaceProvider(Protocol):
    """Anything able to enumerate bridgeable host interfaces"""

    def network_interfaces(self) -> Sequence[NetworkInterface]:
        ...


@runtime_checkable
class AppEntitlements(Protocol):
    """Capability set granted to the running application"""

    def has(self, name: str) -> bool:
        ...


class StaticInterfaceProvider:
    """Interface provider backed by a fixed list, e.g. loaded from a snapshot"""

    def __init__(self, interfaces: Iterable[NetworkInterface] = ()) -> None:
        self._interfaces: tuple[NetworkInterface, ...] = tuple(interfaces)

    def network_interfaces(self) -> Sequence[NetworkInterface]:
        return self._interfaces


class StaticEntitlements:
    """Entitlement set backed by a fixed collection of names"""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: frozenset[str] = frozenset(names)

    def has(self, name: str) -> bool:
        return name in self._names


class HostSnapshot(BaseModel):
    """Host capabilities plus interfaces and entitlements, as stored in a JSON file"""
    model_config = ConfigDict(frozen=True)

    host: HostCapabilities
    network_interfaces: tuple[NetworkInterface, ...] = ()
    entitlements: tuple[str, ...] = ()

    @classmethod
    def from_json(cls, data: str | bytes) -> HostSnapshot:
        """Load either a full snapshot or a bare HostCapabilities document"""
        try:
            return cls.model_validate_json(data)
        except ValidationError:
            return cls(host=HostCapabilities.model_validate_json(data))

    def interface_provider(self) -> StaticInterfaceProvider:
        return StaticInterfaceProvider(self.network_interfaces)

    def app_entitlements(self) -> StaticEntitlements:
        return StaticEntitlements(self.entitlements)
