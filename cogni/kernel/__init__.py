"""
Kernel layer

- Identity Core (credentials, roles, access tokens)
- Document persistence (one JSON document per entity collection)

Invariants:
- Documents are replaced whole, never patched
- Only LearningPlatform writes documents
"""
