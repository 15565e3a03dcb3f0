# =============================================================================
# 04_Classes.py - Classes and their teachers
# =============================================================================
from __future__ import annotations

from madrasa_core.ui import render_entity_page, setup_page

stack, lang = setup_page("nav.classes", "🏫")

render_entity_page(stack, lang, "classes")
