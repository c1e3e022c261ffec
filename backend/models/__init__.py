from .enums import Confidence, StoreState
from .params import (
    PARAM_SPECS,
    CompanyMetrics,
    ConversionRates,
    ParamIssue,
    Params,
    ParamSpec,
    validate_params,
)
from .research import ResearchRecord

__all__ = [
    "Confidence",
    "StoreState",
    "PARAM_SPECS",
    "CompanyMetrics",
    "ConversionRates",
    "ParamIssue",
    "Params",
    "ParamSpec",
    "validate_params",
    "ResearchRecord",
]
