"""Infrastructure Layer: storage, OS integration and cross-cutting concerns.

Invariants:
    - Infrastructure implements core/boundary_protocols.py; core never imports it
    - Every external failure is mapped to a ReqDeckError or a False return

Design Decisions:
    - One adapter per boundary protocol, wired together in main.py
"""
