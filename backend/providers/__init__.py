from .base import ResearchProvider
from .perplexity_provider import PerplexityProvider
from .api_client import ResearchAPIClient
from .errors import (
    ConfigurationError,
    InvalidIdentifierError,
    ParseError,
    ResearchError,
    UpstreamError,
)

__all__ = [
    "ResearchProvider",
    "PerplexityProvider",
    "ResearchAPIClient",
    "ResearchError",
    "InvalidIdentifierError",
    "ConfigurationError",
    "UpstreamError",
    "ParseError",
]
