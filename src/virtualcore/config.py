"""Platform and display limits used when resolving hardware ranges"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

GIB: int = 1024 * 1024 * 1024
MIB: int = 1024 * 1024

# Entitlement an app needs before bridged networking can be offered
NETWORKING_ENTITLEMENT: str = "com.apple.vm.networking"


class PlatformLimits(BaseModel):
    """Hard bounds imposed by the hypervisor, independent of the host"""
    model_config = ConfigDict(frozen=True)

    minimum_cpu_count: int = Field(1, ge=1, description="Minimum virtual CPU count")
    maximum_cpu_count: int = Field(64, ge=1, description="Maximum virtual CPU count")
    minimum_memory_bytes: int = Field(128 * MIB, gt=0, description="Minimum memory size in bytes")
    maximum_memory_bytes: int = Field(768 * GIB, gt=0, description="Maximum memory size in bytes")
    minimum_memory_gb: int = Field(2, gt=0, description="Smallest memory size offered for editing, in GB")


class DisplayLimits(BaseModel):
    """Display bounds; the width/height ceilings may be raised for extra-wide displays"""
    model_config = ConfigDict(validate_assignment=True)

    minimum_dimension: int = Field(800, gt=0, description="Minimum display width and height")
    maximum_width: int = Field(6016, gt=0, description="Maximum display width")
    maximum_height: int = Field(3384, gt=0, description="Maximum display height")
    minimum_ppi: int = Field(80, gt=0, description="Minimum pixels per inch")
    maximum_ppi: int = Field(218, gt=0, description="Maximum pixels per inch")
