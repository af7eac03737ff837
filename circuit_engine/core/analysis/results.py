"""
Result containers returned by every analysis entry point.

Each container carries success/message/error and converts itself with
to_dict() into the camelCase structure the editor consumes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Tuple

import numpy as np


@dataclass
class AnalysisResults:
    """Fields shared by all analysis results"""
    success: bool = False
    message: str = ""
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    regularized_pivots: int = 0  # Pivots replaced under the "regularize" policy
    solve_time: float = 0.0

    @classmethod
    def failure(cls, error, message: str = None):
        error_text = str(error)
        return cls(success=False, error=error_text, message=message or f"Error: {error_text}")

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error, "message": self.message}
        data = {
            "success": True,
            "message": self.message,
            "warnings": list(self.warnings),
            "regularizedPivots": self.regularized_pivots,
        }
        data.update(self._payload())
        return data

    def _payload(self) -> Dict[str, Any]:
        return {}


@dataclass
class ComponentData:
    type: str
    label: str
    voltage: float
    current: float
    power: float
    nodes: Tuple[int, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "label": self.label,
            "voltage": self.voltage,
            "current": self.current,
            "power": self.power,
            "nodes": list(self.nodes),
        }


@dataclass
class DCResult(AnalysisResults):
    node_voltages: Dict[int, float] = field(default_factory=dict)
    component_data: Dict[Hashable, ComponentData] = field(default_factory=dict)
    node_map: Dict[Hashable, List[int]] = field(default_factory=dict)
    num_nodes: int = 0

    def _payload(self):
        return {
            "results": {
                "nodeVoltages": dict(self.node_voltages),
                "componentData": {cid: data.to_dict() for cid, data in self.component_data.items()},
            },
            "nodeMap": {cid: list(nodes) for cid, nodes in self.node_map.items()},
            "numNodes": self.num_nodes,
        }


@dataclass
class BodePoint:
    frequency: float
    magnitude_db: float
    phase_degrees: float

    def to_dict(self):
        return {"frequency": self.frequency, "magnitudeDb": self.magnitude_db, "phaseDegrees": self.phase_degrees}


@dataclass
class SweepPoint:
    frequency: float
    omega: float
    node_voltages: Dict[int, complex]


@dataclass
class ACResult(AnalysisResults):
    points: List[BodePoint] = field(default_factory=list)
    sweep: List[SweepPoint] = field(default_factory=list)
    input_node: Optional[int] = None
    output_node: Optional[int] = None
    num_nodes: int = 0

    @property
    def frequencies(self) -> np.ndarray:
        return np.array([point.frequency for point in self.sweep])

    def node_response(self, node: int) -> np.ndarray:
        """Complex voltage of one node across the sweep"""
        return np.array([point.node_voltages[node] for point in self.sweep], dtype=complex)

    def _payload(self):
        return {
            "results": [point.to_dict() for point in self.points],
            "inputNode": self.input_node,
            "outputNode": self.output_node,
        }


@dataclass
class TransientSample:
    time: float
    node_voltages: Dict[int, float]
    component_currents: Dict[Hashable, float] = field(default_factory=dict)

    def to_dict(self):
        return {
            "time": self.time,
            "nodeVoltages": dict(self.node_voltages),
            "componentCurrents": dict(self.component_currents),
        }


@dataclass
class TransientResult(AnalysisResults):
    samples: List[TransientSample] = field(default_factory=list)
    time_step: float = 0.0
    method: str = ""
    num_nodes: int = 0

    @property
    def times(self) -> np.ndarray:
        return np.array([sample.time for sample in self.samples])

    def waveform(self, node: int) -> np.ndarray:
        """Voltage of one node over time"""
        return np.array([sample.node_voltages[node] for sample in self.samples])

    def current_waveform(self, component_id: Hashable) -> np.ndarray:
        return np.array([sample.component_currents[component_id] for sample in self.samples])

    def _payload(self):
        return {
            "results": [sample.to_dict() for sample in self.samples],
            "timeStep": self.time_step,
            "method": self.method,
        }


@dataclass
class SpectrumBin:
    frequency: float
    magnitude: float
    magnitude_db: float
    phase_degrees: float

    def to_dict(self):
        return {
            "frequency": self.frequency,
            "magnitude": self.magnitude,
            "magnitudeDb": self.magnitude_db,
            "phaseDegrees": self.phase_degrees,
        }


@dataclass
class SpectrumResult(AnalysisResults):
    bins: List[SpectrumBin] = field(default_factory=list)
    sample_rate: float = 0.0
    size: int = 0
    window: str = ""

    @property
    def resolution(self) -> float:
        """Frequency spacing between bins"""
        return self.sample_rate / self.size if self.size else 0.0

    def peak(self, skip_dc: bool = True) -> Optional[SpectrumBin]:
        candidates = self.bins[1:] if skip_dc else self.bins
        if not candidates:
            return None
        return max(candidates, key=lambda b: b.magnitude)

    def _payload(self):
        return {
            "results": [b.to_dict() for b in self.bins],
            "sampleRate": self.sample_rate,
            "size": self.size,
            "window": self.window,
        }
