from .research_orchestrator import LookupResult, ResearchOrchestrator
from .parameter_store import ParameterStore
from .session import ROISession

__all__ = [
    "LookupResult",
    "ResearchOrchestrator",
    "ParameterStore",
    "ROISession",
]
