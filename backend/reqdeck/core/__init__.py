"""Core Layer: pure table-editing logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Time and identifiers are injected (clock callables, uuid defaults) so tests stay deterministic

Design Decisions:
    - Functional core separated from imperative shell: the shell saves, notifies and prompts
"""
