#!/usr/bin/env python3
"""
evenstream Smoke Test

Quick import and basic functionality test to ensure the package is working.
This test should run fast and catch major import/API issues.
"""

import sys
from pathlib import Path

# Add project root to path for testing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def test_core_imports():
    """Test that core evenstream modules import successfully."""
    import evenstream as es
    from evenstream.fields import StructuredGridField2D
    from evenstream.tracking import EvenStreamlinePlacer, PlacementOptions
    from evenstream.density import KDTreeNeighbors, streamline_distances

    assert es.__version__
    print(f"✅ evenstream {es.__version__}")


def test_basic_functionality():
    """Place streamlines in a small shear field and recompute distances."""
    import numpy as np
    import evenstream as es

    x = np.linspace(0, 1, 21)
    xx, yy = np.meshgrid(x, x)
    uu = np.ones_like(xx)
    vv = 0.2 * np.cos(np.pi * xx)

    result = es.evenly_spaced_streamlines(xx, yy, uu, vv, d_sep=0.2, d_test=0.1, step_size=0.5, rng=0)
    assert result.n_lines >= 1
    print(f"✅ Placed {result.n_lines} streamlines")

    d = es.streamline_distances(result.separated_xy())
    assert d.shape[0] == len(result) - 1
    print("✅ Standalone distances computed")


def main():
    """Run all smoke tests."""
    print("evenstream Smoke Test")
    print("=" * 50)

    tests = [
        ("Core Imports", test_core_imports),
        ("Basic Functionality", test_basic_functionality),
    ]

    passed = 0
    total = len(tests)

    for name, test_func in tests:
        print(f"\n🧪 Running: {name}")
        try:
            test_func()
            passed += 1
            print(f"✅ {name}: PASSED")
        except Exception as e:
            print(f"❌ {name}: ERROR - {e}")

    print(f"\n📊 Results: {passed}/{total} tests passed")

    if passed == total:
        print("🎉 All smoke tests PASSED!")
        return 0
    else:
        print("💥 Some smoke tests FAILED!")
        return 1


if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
