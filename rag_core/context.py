"""
Caller-side helpers for turning retrieved records into generation context
and display-friendly hits. The engine itself never calls these.
"""

from typing import Any, Dict, List, Optional, Sequence

from .types import Record, ScoredRecord

DEFAULT_SEPARATOR = "\n\n---\n\n"
TRUNCATION_MARKER = "\n... [truncated]"


def compose_context(
    records: Sequence[Record],
    separator: str = DEFAULT_SEPARATOR,
    max_chars: Optional[int] = None,
) -> str:
    """
    Join chunk texts into one context string for a downstream generation call.

    - Records are joined in the order given (best first from a query).
    - With ``max_chars``, the result never exceeds that length: the record
      that crosses the budget is truncated and later records are dropped.
    """
    parts: List[str] = []
    total = 0

    for record in records:
        sep = separator if parts else ""
        block = record.text
        if max_chars is not None and total + len(sep) + len(block) > max_chars:
            remaining = max_chars - total - len(sep) - len(TRUNCATION_MARKER)
            if remaining > 0:
                parts.append(sep + block[:remaining] + TRUNCATION_MARKER)
            break
        parts.append(sep + block)
        total += len(sep) + len(block)

    return "".join(parts)


def _preview(text: str, preview_chars: int) -> str:
    return text[:preview_chars] + "..."


def to_hits(scored: Sequence[ScoredRecord], preview_chars: int = 200) -> List[Dict[str, Any]]:
    """
    Flatten scored records into plain dicts for display or JSON.

    Each hit has rank (1-based), score, text, preview and the record metadata.
    """
    hits: List[Dict[str, Any]] = []
    for rank, item in enumerate(scored, start=1):
        record = item.record
        hit: Dict[str, Any] = {
            "rank": rank,
            "score": item.score,
            "text": record.text,
            "preview": _preview(record.text, preview_chars),
        }
        hit.update(record.metadata.to_dict())
        hits.append(hit)
    return hits
