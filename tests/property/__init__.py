"""Property-based testing for jobflow components.

This package contains property-based tests using the Hypothesis library to
check the engine's invariants over generated rule tables and fact snapshots.
"""
