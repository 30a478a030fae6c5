"""
Note structuring boundary for clinote.

Design intent:
- Split bundles, parse sections, normalize and validate notes deterministically.
- Never fail on malformed text; surface quality problems as validation issues.
- Keep every step a pure function of its inputs.
"""
