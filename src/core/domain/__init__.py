"""Domain models and value types.

Pure data structures (Pydantic v2 and dataclasses). The domain knows nothing
about XML, HTTP or the CLI: only shipping concepts.
"""
