"""Terminal-Ausgabe (Rich) für den Vertretungsplaner."""

from export.tui_renderer import (
    print_candidates,
    print_cover_plan,
    print_leaves,
    print_subs,
    print_teacher_week,
    render_candidate_rows,
    render_teacher_rows,
)

__all__ = [
    "print_candidates",
    "print_cover_plan",
    "print_leaves",
    "print_subs",
    "print_teacher_week",
    "render_candidate_rows",
    "render_teacher_rows",
]
