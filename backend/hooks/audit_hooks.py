"""Audit hooks: logs research lookups for the audit trail."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from backend.models.enums import LookupSource

logger = logging.getLogger(__name__)


def log_lookup(
    identifier: str,
    source: LookupSource,
    result: Any = None,
) -> dict[str, Any]:
    """Record a research lookup in the audit log.

    Returns the audit entry dict for downstream persistence.
    """
    entry = {
        "identifier": identifier,
        "source": source.value,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "result_summary": str(result)[:500] if result is not None else None,
    }
    logger.info("Research lookup audit: %s ← %s", identifier, source.value)
    return entry
