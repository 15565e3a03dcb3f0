from .page import setup_page, configure_logging
from .theme import apply_css, status_color
from .components import (
    header,
    stat_card,
    add_grid,
    status_badge,
    sync_status_text,
    render_notifications,
    show_result,
    entity_table,
    entity_form,
    confirm_delete,
)
from .sidebar_brand import render_sidebar
from .entity_page import render_entity_page, build_lookups

__all__ = [
    "setup_page",
    "configure_logging",
    "apply_css",
    "status_color",
    "header",
    "stat_card",
    "add_grid",
    "status_badge",
    "sync_status_text",
    "render_notifications",
    "show_result",
    "entity_table",
    "entity_form",
    "confirm_delete",
    "render_sidebar",
    "render_entity_page",
    "build_lookups",
]
