#!/usr/bin/env python3
"""
Test script for the modular simulator architecture.
This validates that the analysis engines, component models and facade are
wired together correctly.
"""

import sys
import os

# Add the project root to the path
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)


def test_modular_analysis_imports():
    """Test that all modular analysis components can be imported."""
    print("Testing modular analysis imports...")

    from circuit_engine.core.analysis import (
        ACAnalysisEngine, DCAnalysisEngine, ResultsFormatter, SpectrumAnalyzer, TransientAnalysisEngine,
    )
    from circuit_engine.core.analysis.base import AnalysisEngine

    for engine in (DCAnalysisEngine, ACAnalysisEngine, TransientAnalysisEngine):
        assert issubclass(engine, AnalysisEngine)
    assert SpectrumAnalyzer is not None and ResultsFormatter is not None
    print("✅ All modular analysis components imported successfully")


def test_component_model_registry():
    """Test that every supported component kind has a model."""
    print("\nTesting component model registry...")

    from circuit_engine.components import COMPONENT_MODELS, ComponentModel
    from circuit_engine.config import COMPONENT_TERMINALS

    assert set(COMPONENT_MODELS) == set(COMPONENT_TERMINALS)
    for kind, model in COMPONENT_MODELS.items():
        assert issubclass(model, ComponentModel)
        assert model.kind == kind
    print(f"✅ {len(COMPONENT_MODELS)} component models registered")


def test_results_formatter():
    """Test the results formatter functionality."""
    print("\nTesting results formatter...")

    from circuit_engine.core.analysis.results import ComponentData, DCResult
    from circuit_engine.core.analysis.results_formatter import ResultsFormatter

    result = DCResult(
        success=True,
        node_voltages={0: 0.0, 1: 5.0, 2: 0.0033},
        component_data={
            "R1": ComponentData("resistor", "R1", 5.0, 0.001, 0.005, (1, 0)),
        },
        num_nodes=3,
    )
    formatter = ResultsFormatter(result)

    description = formatter.get_results_description()
    assert "DC Simulation Results:" in description
    assert "Node Voltages:" in description
    assert "Node 1: 5 V" in description
    assert "Node 2: 3.3 mV" in description
    assert "1 mA →" in description

    stats = formatter.get_summary_stats()
    assert stats['max_voltage'] == 5.0
    assert stats['num_components'] == 1
    print("✅ Results formatter working correctly")


def test_formatter_handles_failures():
    """Test that failed or missing results are described."""
    print("\nTesting formatter failure handling...")

    from circuit_engine.core.analysis.results import DCResult
    from circuit_engine.core.analysis.results_formatter import ResultsFormatter

    assert ResultsFormatter(None).get_results_description() == "No simulation results available."
    failed = DCResult.failure("boom", "DC analysis failed: boom")
    assert "DC analysis failed: boom" in ResultsFormatter(failed).get_results_description()
    print("✅ Failures formatted correctly")


def test_simulator_facade():
    """Test that the simulator keeps the latest result per analysis type."""
    print("\nTesting simulator facade...")

    from circuit_builders import rc_lowpass
    from circuit_engine import AnalysisType, CircuitSimulator

    simulator = CircuitSimulator(*rc_lowpass())
    assert simulator.get_results_description(AnalysisType.AC) == "No ac analysis results available."

    dc = simulator.run_dc_analysis()
    ac = simulator.run_ac_analysis(start_freq=10, end_freq=100, points_per_decade=1, input_node=1, output_node=2)
    assert simulator.last_results[AnalysisType.DC] is dc
    assert simulator.last_results[AnalysisType.AC] is ac
    print("✅ Simulator facade working correctly")


def test_file_structure():
    """Test that the file structure is correct."""
    print("\nTesting file structure...")

    expected_files = [
        'circuit_engine/config.py',
        'circuit_engine/exceptions.py',
        'circuit_engine/cli.py',
        'circuit_engine/core/mna.py',
        'circuit_engine/core/solver.py',
        'circuit_engine/core/netlist.py',
        'circuit_engine/core/simulator.py',
        'circuit_engine/core/analysis/__init__.py',
        'circuit_engine/core/analysis/dc_analysis.py',
        'circuit_engine/core/analysis/ac_analysis.py',
        'circuit_engine/core/analysis/transient_analysis.py',
        'circuit_engine/core/analysis/spectrum_analysis.py',
        'circuit_engine/core/analysis/results_formatter.py',
    ]

    missing_files = [
        file_path for file_path in expected_files
        if not os.path.exists(os.path.join(project_root, file_path))
    ]
    assert not missing_files, f"Missing files: {missing_files}"
    print("✅ All expected files present")


def main():
    """Run all tests."""
    print("=" * 60)
    print("CIRCUIT ENGINE MODULAR ARCHITECTURE TESTS")
    print("=" * 60)

    tests = [
        test_file_structure,
        test_modular_analysis_imports,
        test_component_model_registry,
        test_results_formatter,
        test_formatter_handles_failures,
        test_simulator_facade,
    ]

    passed = 0
    total = len(tests)

    for test in tests:
        try:
            test()
            passed += 1
        except (AssertionError, ImportError) as e:
            print(f"❌ {test.__name__} failed: {e}")

    print("\n" + "=" * 60)
    print(f"TEST RESULTS: {passed}/{total} tests passed")

    if passed == total:
        print("🎉 ALL TESTS PASSED - Modular architecture working correctly!")
    else:
        print("⚠️  Some tests failed - check the output above")

    print("=" * 60)

    return passed == total


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
