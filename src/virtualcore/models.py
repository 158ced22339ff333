"""Pydantic models for VM hardware configuration"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import GIB

DEFAULT_DEVICE_NAME: str = "Default"


class NetworkKind(str, Enum):
    """How a network device is attached to the host"""
    NAT = "nat"
    BRIDGE = "bridge"

    @property
    def display_name(self) -> str:
        return "NAT" if self is NetworkKind.NAT else "Bridge"


class PointingKind(str, Enum):
    """Pointing device exposed to the guest"""
    MOUSE = "mouse"
    TRACKPAD = "trackpad"

    @property
    def display_name(self) -> str:
        return self.value.title()


class DisplayDevice(BaseModel):
    """Model for a virtual display.

    Dimensions are not range-checked here; editing code may hold transient
    out-of-range values and checks them against ``HardwareRanges``.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4, description="Display identity")
    name: str = Field(DEFAULT_DEVICE_NAME, description="Display name")
    width: int = Field(1920, description="Width in pixels")
    height: int = Field(1080, description="Height in pixels")
    pixels_per_inch: int = Field(144, description="Pixel density")

    @property
    def resolution_label(self) -> str:
        return f"{self.width}x{self.height}@{self.pixels_per_inch}"

    def same_geometry(self, other: DisplayDevice) -> bool:
        """Compare size and density, ignoring identity and name"""
        return (self.width, self.height, self.pixels_per_inch) == (
            other.width, other.height, other.pixels_per_inch
        )


class NetworkDevice(BaseModel):
    """Model for a virtual network interface"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(DEFAULT_DEVICE_NAME, description="Device identity")
    name: str = Field(DEFAULT_DEVICE_NAME, description="Device name")
    kind: NetworkKind = Field(NetworkKind.NAT, description="Attachment kind")
    mac_address: str = Field(..., description="MAC address, checked with validate_mac")
    bridge_interface_id: Optional[str] = Field(None, description="Host interface for bridged devices")

    @model_validator(mode="after")
    def check_bridge_interface(self) -> NetworkDevice:
        if self.kind is NetworkKind.BRIDGE and not self.bridge_interface_id:
            raise ValueError("bridged network devices need a bridge interface")
        if self.kind is NetworkKind.NAT and self.bridge_interface_id is not None:
            raise ValueError("NAT network devices cannot have a bridge interface")
        return self


class PointingDevice(BaseModel):
    """Model for the guest pointing device"""
    model_config = ConfigDict(frozen=True)

    kind: PointingKind = Field(PointingKind.MOUSE, description="Pointing device kind")


class SoundDevice(BaseModel):
    """Model for a virtual sound device; input and output toggle independently"""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4, description="Sound device identity")
    name: str = Field(DEFAULT_DEVICE_NAME, description="Sound device name")
    enable_output: bool = Field(True, description="Whether audio output is enabled")
    enable_input: bool = Field(True, description="Whether audio input is enabled")


class NVRAMVariable(BaseModel):
    """Opaque NVRAM key/value pair"""
    model_config = ConfigDict(frozen=True)

    name: str
    value: str


class MacHardwareDevice(BaseModel):
    """Model for the complete VM hardware set"""
    model_config = ConfigDict(frozen=True)

    cpu_count: int = Field(..., description="Number of virtual CPUs")
    memory_size: int = Field(..., ge=0, lt=2 ** 64, description="Memory size in bytes")
    pointing_device: PointingDevice = Field(default_factory=PointingDevice, description="Pointing device")
    display_devices: tuple[DisplayDevice, ...] = Field(..., description="Displays, in order")
    network_devices: tuple[NetworkDevice, ...] = Field((), description="Network devices, in order")
    sound_devices: tuple[SoundDevice, ...] = Field((), description="Sound devices, in order")
    nvram: tuple[NVRAMVariable, ...] = Field((), description="NVRAM variables, in order")

    @property
    def memory_size_gb(self) -> int:
        return self.memory_size // GIB


class SharedFolder(BaseModel):
    """Model for a host folder shared with the guest"""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Shared folder identity")
    path: Path = Field(..., description="Host path of the folder")
    is_read_only: bool = Field(True, description="Whether the guest may only read the folder")

    @property
    def name(self) -> str:
        return self.path.name


class VBMacConfiguration(BaseModel):
    """Root configuration: one hardware set plus shared folders.

    Equality and hashing are structural over every nested field.
    """
    model_config = ConfigDict(frozen=True)

    hardware: MacHardwareDevice = Field(..., description="Hardware set")
    shared_folders: tuple[SharedFolder, ...] = Field((), description="Shared folders, in order")

    def to_json(self, indent: Optional[int] = None) -> str:
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> VBMacConfiguration:
        return cls.model_validate_json(data)


class DisplayPreset(BaseModel):
    """Named display template; availability is decided when the catalog is built"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Preset name, also its identity")
    device: DisplayDevice = Field(..., description="Display the preset applies")
    warning: Optional[str] = Field(None, description="Note shown when the preset is picked")
    is_available: bool = Field(True, description="Whether the preset applies to this host")

    @property
    def id(self) -> str:
        return self.name


class BridgeInterface(BaseModel):
    """Host interface choice offered for bridged networking"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class CompatibilityInfo(BaseModel):
    """Whether a device kind works with a guest, plus an optional warning"""
    model_config = ConfigDict(frozen=True)

    supported: bool
    warning: Optional[str] = None


class VirtualizationSupport(BaseModel):
    """Model for virtualization support information"""
    model_config = ConfigDict(str_strip_whitespace=True)

    supported: bool = Field(..., description="Whether virtualization is supported")
    framework_available: bool = Field(..., description="Whether Virtualization framework is available")
    message: str = Field(..., description="Support status message")
    pyobjc_version: Optional[str] = Field(None, description="PyObjC version if available")
    error: Optional[str] = Field(None, description="Error message if not supported")
