"""
CIDR Tier Utilities.

Responsibility boundaries:
- Defines the ordered address-space tiers used as progression rank.
- Pure helpers for tier ordering and address arithmetic.
"""

from enum import IntEnum
from typing import List, Optional


class CIDRTier(IntEnum):
    """
    Prefix length of the simulated subnet.
    Lower value = larger address space = higher rank.
    """
    CIDR_30 = 30
    CIDR_24 = 24
    CIDR_20 = 20
    CIDR_16 = 16
    CIDR_12 = 12
    CIDR_8 = 8


# Progression order, smallest subnet first.
TIER_ORDER: List[CIDRTier] = [
    CIDRTier.CIDR_30,
    CIDRTier.CIDR_24,
    CIDRTier.CIDR_20,
    CIDRTier.CIDR_16,
    CIDRTier.CIDR_12,
    CIDRTier.CIDR_8,
]


def get_next_tier(current: CIDRTier) -> Optional[CIDRTier]:
    """Return the next prestige tier, or None when already at /8."""
    index = TIER_ORDER.index(current)
    if index < len(TIER_ORDER) - 1:
        return TIER_ORDER[index + 1]
    return None


def get_available_ips(tier: CIDRTier) -> int:
    return 2 ** (32 - int(tier))


def get_subnet_mask(tier: CIDRTier) -> str:
    """Dotted-decimal netmask, e.g. /24 -> 255.255.255.0."""
    mask = (0xFFFFFFFF << (32 - int(tier))) & 0xFFFFFFFF
    return ".".join(str((mask >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def get_tier_name(tier: CIDRTier) -> str:
    return f"/{int(tier)}"
