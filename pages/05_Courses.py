# =============================================================================
# 05_Courses.py - Course catalogue
# =============================================================================
from __future__ import annotations

from madrasa_core.ui import render_entity_page, setup_page

stack, lang = setup_page("nav.courses", "📚")

render_entity_page(stack, lang, "courses")
