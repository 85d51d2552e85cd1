"""Core Layer: pure catalog and sale rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Functions here are deterministic given their inputs (clock and uuid are passed in)
"""
