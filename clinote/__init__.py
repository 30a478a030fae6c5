"""
clinote package.

Design intent:
- Turn free-form clinical note text into template-conformant structured notes.
- Keep domain modules (note parsing/normalizing/validation) independent from the API and CLI surfaces.
"""
