"""Legal hardware ranges derived from the host and platform limits"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from .config import GIB, DisplayLimits, PlatformLimits
from .host import HostCapabilities

logger = logging.getLogger(__name__)


class ClosedRange(BaseModel):
    """Closed integer interval [lower, upper]; never inverted"""
    model_config = ConfigDict(frozen=True)

    lower: int
    upper: int

    @model_validator(mode="after")
    def check_order(self) -> ClosedRange:
        if self.lower > self.upper:
            raise ValueError(f"inverted range {self.lower}...{self.upper}")
        return self

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.lower <= value <= self.upper

    @property
    def is_degenerate(self) -> bool:
        return self.lower == self.upper

    def clamp(self, value: int) -> int:
        return max(self.lower, min(value, self.upper))

    def __str__(self) -> str:
        return f"{self.lower}...{self.upper}"


class HardwareRanges(BaseModel):
    """Ranges resolved once for a host snapshot"""
    model_config = ConfigDict(frozen=True)

    cpu_count: ClosedRange
    memory_size_gb: ClosedRange
    display_width: ClosedRange
    display_height: ClosedRange
    display_ppi: ClosedRange


class RangeResolver:
    """Computes legal CPU, memory and display ranges.

    The resolver owns the platform and display limits it was built with, so
    raising the display ceilings for one resolver does not affect others.
    """

    def __init__(self,
                 platform: Optional[PlatformLimits] = None,
                 display: Optional[DisplayLimits] = None) -> None:
        self.platform: PlatformLimits = platform or PlatformLimits()
        self.display: DisplayLimits = display or DisplayLimits()

    def cpu_range(self, host: HostCapabilities) -> ClosedRange:
        lower = self.platform.minimum_cpu_count
        upper = min(host.logical_processor_count, self.platform.maximum_cpu_count)
        if upper < lower:
            logger.debug(f"Host reports {host.logical_processor_count} processors, collapsing CPU range to {lower}")
            upper = lower
        return ClosedRange(lower=lower, upper=upper)

    def memory_range_gb(self, host: HostCapabilities) -> ClosedRange:
        lower = self.platform.minimum_memory_gb
        upper = min(host.physical_memory_bytes, self.platform.maximum_memory_bytes) // GIB
        if upper < lower:
            logger.debug(f"Host memory below {lower} GB, collapsing memory range")
            upper = lower
        return ClosedRange(lower=lower, upper=upper)

    def display_width_range(self) -> ClosedRange:
        return ClosedRange(
            lower=self.display.minimum_dimension,
            upper=max(self.display.minimum_dimension, self.display.maximum_width),
        )

    def display_height_range(self) -> ClosedRange:
        return ClosedRange(
            lower=self.display.minimum_dimension,
            upper=max(self.display.minimum_dimension, self.display.maximum_height),
        )

    def display_ppi_range(self) -> ClosedRange:
        return ClosedRange(
            lower=self.display.minimum_ppi,
            upper=max(self.display.minimum_ppi, self.display.maximum_ppi),
        )

    def memory_bytes_bounds(self) -> ClosedRange:
        """Byte-level bounds used for the default memory size, not the GB range"""
        return ClosedRange(
            lower=self.platform.minimum_memory_bytes,
            upper=max(self.platform.minimum_memory_bytes, self.platform.maximum_memory_bytes),
        )

    def resolve(self, host: HostCapabilities) -> HardwareRanges:
        ranges = HardwareRanges(
            cpu_count=self.cpu_range(host),
            memory_size_gb=self.memory_range_gb(host),
            display_width=self.display_width_range(),
            display_height=self.display_height_range(),
            display_ppi=self.display_ppi_range(),
        )
        logger.debug(f"Resolved ranges: CPU {ranges.cpu_count}, memory {ranges.memory_size_gb} GB")
        return ranges
