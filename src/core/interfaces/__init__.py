"""Core interfaces.

Why:
- Collaborators the client consumes (response cache) are described as
  `Protocol`s so concrete implementations stay outside the library.
"""

from core.interfaces.cache import CachedResponse, ResponseCache

__all__ = ["CachedResponse", "ResponseCache"]
