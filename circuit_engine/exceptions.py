class CircuitError(Exception):
    """Base class for errors reported by the simulation engine"""
    pass

class ValidationError(CircuitError):
    """Raised when the circuit or the analysis parameters are not usable"""
    pass

class UnsupportedComponentError(ValidationError):
    """Raised when a component type has no model"""

    def __init__(self, component_id, component_type):
        self.component_id = component_id
        self.component_type = component_type
        super().__init__(f"Unsupported component type '{component_type}' for component '{component_id}'")

class SingularMatrixError(CircuitError):
    """Raised when circuit matrix is singular and the pivot policy forbids regularization"""

    def __init__(self, row, magnitude):
        self.row = row
        self.magnitude = magnitude
        super().__init__(f"Singular or near-singular matrix at row {row} (|pivot| = {magnitude:.3e})")

class AnalysisCancelled(CircuitError):
    """Raised when a caller cancels a running sweep or transient run"""
    pass
