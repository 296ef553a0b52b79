"""
Personal Capital Dashboard - Source Package

A personal finance dashboard for tracking monthly cash flow,
planning recurring investments and projecting total wealth.

DESIGN PRINCIPLES:
1. The projection engine is pure: plain data in, plain data out
2. Derived values (cumulative capital, projections) are always recomputed
3. Validation happens at the caller boundary, never inside the engine
4. Storage layer is swappable (remote-backed or local fallback)
5. Fail visibly: errors are logged and surfaced, never swallowed
"""

__version__ = "1.0.0"
__author__ = "Personal Capital Team"
