"""
Filter engine for the region list.
"""

from .models import Region, Session


def apply_filter(roster: list[Region], filter_text: str) -> list[Region]:
    """
    Get the regions whose display name contains the filter text.
    
    Matching is a case-insensitive substring test and roster order is
    preserved. An empty filter returns a copy of the whole roster.
    """
    if not filter_text:
        return list(roster)

    needle = filter_text.lower()
    return [region for region in roster if needle in region.display_name.lower()]


def renormalize_selection(selected_index: int, filtered_count: int) -> int:
    """Clamp a selection index into the filtered view.

    With an empty view the index is returned unchanged; it is not
    meaningful until the view has entries again.
    """
    if filtered_count == 0:
        return selected_index
    return max(0, min(selected_index, filtered_count - 1))


def refilter(session: Session) -> None:
    """Recompute the filtered view of a session and fix up its selection."""
    session.filtered = apply_filter(session.roster, session.filter_text)
    session.selected_index = renormalize_selection(
        session.selected_index, len(session.filtered)
    )
