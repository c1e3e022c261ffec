from .base import ResearchCache, normalize_identifier
from .json_file import JsonFileResearchCache
from .memory import InMemoryResearchCache

__all__ = [
    "ResearchCache",
    "normalize_identifier",
    "JsonFileResearchCache",
    "InMemoryResearchCache",
]
