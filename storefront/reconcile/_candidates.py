"""Candidate slugs for a composite id."""

from __future__ import annotations

from storefront._types import CompositeId, Slug


def candidate_slugs(composite_id: CompositeId, separator: str = "-") -> list[Slug]:
    """
    The full id, then each strictly shorter prefix, longest first.

    Slugs may contain the separator themselves, so the split point is not
    known without asking the catalog.

    Example:
        candidate_slugs("aged-gouda-200g")
        # ["aged-gouda-200g", "aged-gouda", "aged"]
    """
    parts = composite_id.split(separator)
    candidates = [composite_id]
    for end in range(len(parts) - 1, 0, -1):
        prefix = separator.join(parts[:end])
        if prefix and prefix not in candidates:
            candidates.append(prefix)
    return candidates


__all__ = ("candidate_slugs",)
