"""
HTTP API boundary for clinote.

Design intent:
- Keep route handlers thin and typed.
- Delegate all note logic to clinote.note.service.
"""
