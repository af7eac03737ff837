from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional


GMIN = 1e-12  # Minimum conductance added to every non-reference node
PIVOT_THRESHOLD = 1e-12
REGULARIZED_PIVOT = 1e-10
LED_RESISTANCE = 100.0
INDUCTOR_DC_RESISTANCE = 1e-9  # Series resistance of an inductor in its DC branch row

# The zero-time transient solve treats each capacitor as a backward Euler step
# of INITIAL_STEP_FRACTION * dt; a capacitor that moves further than
# INITIAL_JUMP_TOLERANCE (relative to the largest node voltage) has jumped.
INITIAL_STEP_FRACTION = 1e-9
INITIAL_JUMP_TOLERANCE = 1e-6

GROUND_NODE = 0

COMPONENT_TERMINALS = {
    "voltage_source": 2,
    "current_source": 2,
    "resistor": 2,
    "capacitor": 2,
    "inductor": 2,
    "led": 2,
    "ground": 1,
}

DEFAULT_COMPONENT_VALUES = {
    "voltage_source": 12.0,
    "current_source": 0.001,
    "resistor": 1000.0,
    "capacitor": 1e-6,
    "inductor": 1e-3,
    "led": 0.0,
    "ground": 0.0,
}

DEFAULT_AC_MAGNITUDES = {
    "voltage_source": 1.0,
    "current_source": 0.0,
}

PIVOT_POLICIES = ("regularize", "raise")
SOLVERS = ("gaussian", "spsolve")


class AnalysisType(Enum):
    """Types of circuit analysis supported"""
    DC = "dc"
    AC = "ac"
    TRANSIENT = "transient"
    SPECTRUM = "spectrum"


class IntegrationMethod(Enum):
    """Implicit integration rules for the transient companion models"""
    TRAPEZOIDAL = "trapezoidal"
    BACKWARD_EULER = "backward_euler"


@dataclass
class SimulationSettings:
    """Configuration settings for simulation"""
    gmin: float = GMIN  # Minimum conductance
    pivot_threshold: float = PIVOT_THRESHOLD
    regularized_pivot: float = REGULARIZED_PIVOT
    pivot_policy: str = "regularize"  # regularize, raise
    solver: str = "gaussian"  # gaussian, spsolve
    led_resistance: float = LED_RESISTANCE
    inductor_dc_resistance: float = INDUCTOR_DC_RESISTANCE
    zero_tolerance: float = 0.0  # Results below this magnitude are reported as 0
    enable_debug: bool = False

    def __post_init__(self):
        if self.pivot_policy not in PIVOT_POLICIES:
            raise ValueError(f"Unknown pivot policy '{self.pivot_policy}', expected one of {PIVOT_POLICIES}")
        if self.solver not in SOLVERS:
            raise ValueError(f"Unknown solver '{self.solver}', expected one of {SOLVERS}")
        if self.gmin < 0:
            raise ValueError("gmin must not be negative")
        if self.inductor_dc_resistance < 0:
            raise ValueError("inductor_dc_resistance must not be negative")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SimulationSettings":
        """Build settings from a plain dict, ignoring keys that are not settings."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
