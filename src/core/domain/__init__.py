"""Domain entities and value objects.

Why:
- Entities are plain, immutable values normalized from Omeda wire records.
- The domain knows nothing about HTTP or the CLI.
"""
