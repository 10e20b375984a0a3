"""Release announcement generation module."""

from .generator import (
    AnnouncementGenerator,
    render_actions,
    render_release_changes,
    render_template,
)

__all__ = [
    "AnnouncementGenerator",
    "render_actions",
    "render_release_changes",
    "render_template",
]
