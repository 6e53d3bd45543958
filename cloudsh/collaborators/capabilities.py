"""
Hardware capability collaborator.

The shell never captures images, audio or positions itself. It only asks a
provider whether a capability can be acquired and reports what happened.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class Capability(Enum):
    """Host capabilities a built-in may request."""
    CAMERA = "camera"
    MICROPHONE = "microphone"
    GEOLOCATION = "geolocation"


@dataclass
class CapabilityGrant:
    """Successful acquisition of a capability.

    Attributes:
        capability: What was granted
        device: Human-readable device label
        coordinates: (latitude, longitude, accuracy in metres), geolocation only
    """

    capability: Capability
    device: str = "default"
    coordinates: Optional[Tuple[float, float, float]] = None


class CapabilityDenied(Exception):
    """The host refused or could not provide a capability."""

    def __init__(self, capability: Capability, reason: str = "permission denied"):
        self.capability = capability
        self.reason = reason
        super().__init__(f"{capability.value} access denied: {reason}")


class CapabilityProvider(ABC):
    """
    Abstract interface to the host's capability APIs.

    Handles returned by `acquire` are released by the provider before it
    returns; callers keep nothing open.
    """

    @abstractmethod
    async def acquire(self, capability: Capability) -> CapabilityGrant:
        """
        Try to acquire a capability.

        Args:
            capability: The capability to request

        Returns:
            CapabilityGrant on success

        Raises:
            CapabilityDenied: If the host refuses or lacks the device
        """
        pass


class UnavailableCapabilities(CapabilityProvider):
    """Provider for hosts with no capability bridge: denies everything."""

    def __init__(self, reason: str = "no such device"):
        self.reason = reason

    async def acquire(self, capability: Capability) -> CapabilityGrant:
        raise CapabilityDenied(capability, self.reason)


class StaticCapabilities(CapabilityProvider):
    """
    Provider that grants a fixed set of capabilities.

    Useful for demos and headless runs where the operator decides up front
    which devices the shell may "use".
    """

    def __init__(
        self,
        granted: Iterable[Capability],
        coordinates: Tuple[float, float, float] = (0.0, 0.0, 10.0),
    ):
        self.granted = set(granted)
        self.coordinates = coordinates

    @classmethod
    def from_names(cls, names: Iterable[str], **kwargs) -> 'StaticCapabilities':
        """
        Build from capability names such as ``["camera", "geolocation"]``.

        Raises:
            ValueError: On an unknown capability name
        """
        return cls([Capability(name.lower()) for name in names], **kwargs)

    async def acquire(self, capability: Capability) -> CapabilityGrant:
        if capability not in self.granted:
            raise CapabilityDenied(capability, "permission denied")

        if capability is Capability.GEOLOCATION:
            return CapabilityGrant(capability, device="gps0", coordinates=self.coordinates)
        if capability is Capability.CAMERA:
            return CapabilityGrant(capability, device="video0")
        return CapabilityGrant(capability, device="hw:0,0")
