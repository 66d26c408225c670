"""ORM Models: SQLAlchemy declarative models for stored documents.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - Models imported here so Base.metadata knows every table before create_all runs
"""

from reqdeck.models.workspace_document import WorkspaceDocument  # noqa: F401
