"""
External collaborators used by the shell's capability and network built-ins.
"""

from .capabilities import (
    Capability,
    CapabilityDenied,
    CapabilityGrant,
    CapabilityProvider,
    StaticCapabilities,
    UnavailableCapabilities,
)
from .network import HttpxNetworkProbe, NetworkProbe, ProbeResult, Unreachable

__all__ = [
    'Capability',
    'CapabilityDenied',
    'CapabilityGrant',
    'CapabilityProvider',
    'StaticCapabilities',
    'UnavailableCapabilities',
    'HttpxNetworkProbe',
    'NetworkProbe',
    'ProbeResult',
    'Unreachable',
]
