from enum import Enum


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ChannelKind(str, Enum):
    SALES = "sales"
    SAVINGS = "savings"


class ParamUnit(str, Enum):
    PERCENT = "percent"
    CURRENCY = "currency"
    COUNT = "count"
    YEARS = "years"


class ParamGroup(str, Enum):
    METRICS = "metrics"
    CONVERSION = "conversion"
    OUTBOUND = "outbound"
    REACTIVATION = "reactivation"
    ADS = "ads"


class WarmBaseline(str, Enum):
    WARM_ACCOUNTS = "warm_accounts"
    FULL_TAM = "full_tam"


class DealValueMode(str, Enum):
    SPLIT = "split"
    COMBINED = "combined"


class StoreState(str, Enum):
    UNSEEDED = "unseeded"
    SEEDED = "seeded"
    EDITED = "edited"


class LookupSource(str, Enum):
    CACHE = "cache"
    PROVIDER = "provider"
