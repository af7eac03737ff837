"""
Component models: one strategy class per component kind.
"""

from .base import ComponentModel, History, StampMode, TransientStep
from .capacitor import CapacitorModel
from .cs import CurrentSourceModel
from .ground import GroundModel
from .inductor import InductorModel
from .led import LEDModel
from .resistor import ResistorModel
from .vs import VoltageSourceModel

COMPONENT_MODELS = {
    model.kind: model
    for model in (
        VoltageSourceModel,
        CurrentSourceModel,
        ResistorModel,
        CapacitorModel,
        InductorModel,
        LEDModel,
        GroundModel,
    )
}


def create_model(component, node_map, settings) -> ComponentModel:
    """Instantiate the model for a component; the type must be registered."""
    model_cls = COMPONENT_MODELS[component.type]
    return model_cls(component, node_map.nodes_of(component), settings)


__all__ = [
    'COMPONENT_MODELS', 'ComponentModel', 'History', 'StampMode', 'TransientStep', 'create_model',
    'CapacitorModel', 'CurrentSourceModel', 'GroundModel', 'InductorModel', 'LEDModel',
    'ResistorModel', 'VoltageSourceModel',
]
