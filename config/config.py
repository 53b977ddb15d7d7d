"""
Simulation Configuration.

Responsibility boundaries:
- Holds every tunable constant of the simulation core.
- Must be passed to initialize systems natively.

Mutation constraints:
- Frozen after initialization to avoid mid-simulation configuration drift.
"""

from dataclasses import dataclass

from utils.cidr_utils import CIDRTier


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable container defining overall runtime scenario setup.
    Distances are world units, times are milliseconds.
    """
    seed: int = 42
    starting_tier: CIDRTier = CIDRTier.CIDR_24

    # Economy
    income_interval_ms: float = 1000.0
    host_base_income: float = 10.0

    # Topology
    max_connection_range: float = 200.0
    base_connection_throughput: float = 100.0
    host_ring_radius: float = 40.0

    # Defensive auras
    honeypot_base_aggro_radius: float = 200.0
    honeypot_threat_decay_per_ms: float = 0.001
    honeypot_redirect_threat_ratio: float = 0.1
    obfuscation_radius: float = 150.0
    ddos_protect_radius: float = 150.0
    ddos_damage_factor: float = 0.5

    # Threat
    max_threat: float = 100.0
    threat_decay_per_second: float = 0.1
    firewall_threshold_ratio: float = 0.7

    # Fog
    world_size: float = 4000.0
