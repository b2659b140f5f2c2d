"""Domain models and value sets.

Pure data structures (Pydantic v2) mirroring the Coolify API. The domain
knows nothing about HTTP or the CLI.
"""
