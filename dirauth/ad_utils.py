from __future__ import annotations


def split_groups(text: str) -> frozenset[str]:
    """Parse a comma-separated group list; blank entries are ignored."""
    if not text:
        return frozenset()
    return frozenset(x.strip() for x in text.split(",") if x.strip())


def strip_domain(principal: str) -> str:
    """``CORP\\alice`` -> ``alice``. Principals without a domain prefix come back unchanged.

    Only the segment between the first and second backslash is kept, so
    ``A\\B\\C`` -> ``B``.
    """
    parts = (principal or "").split("\\")
    if len(parts) > 1 and parts[1]:
        return parts[1]
    return principal
