"""Services Layer: the editor session root and its handler groups.

Invariants:
    - Every handler method runs inside EditorSession.operation(): due deferred callbacks
      first, errors notified on the way out
    - Handlers never talk to storage directly; they call EditorSession.save()

Design Decisions:
    - Handlers split by concern (workspace, tables, gestures, clipboard) and built per call
      around the one shared EditorSession
"""
