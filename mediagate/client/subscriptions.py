"""Merge server-provided subscription sources into the local settings state."""

import re
from typing import Any

_SEPARATORS = re.compile(r"[,\n]")


def parse_sources(raw: str | None) -> list[str]:
    """Split a comma/newline separated list of URLs, dropping blanks and duplicates."""
    seen: list[str] = []
    for part in _SEPARATORS.split(raw or ""):
        url = part.strip()
        if url and url not in seen:
            seen.append(url)
    return seen


def merge_env_subscriptions(settings_state: Any, sources: list[str]) -> dict[str, Any]:
    """
    Return a copy of ``settings_state`` whose ``subscriptions`` list contains every
    source. Existing entries (user-added or earlier env entries) are kept as-is.
    """
    merged = dict(settings_state) if isinstance(settings_state, dict) else {}
    subscriptions = [s for s in merged.get("subscriptions") or [] if isinstance(s, dict)]
    known = {s.get("url") for s in subscriptions}
    for url in sources:
        if url not in known:
            subscriptions.append({"url": url, "fromEnv": True})
            known.add(url)
    merged["subscriptions"] = subscriptions
    return merged
