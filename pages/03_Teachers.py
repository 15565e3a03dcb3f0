# =============================================================================
# 03_Teachers.py - Teaching staff
# =============================================================================
from __future__ import annotations

from madrasa_core.ui import render_entity_page, setup_page

stack, lang = setup_page("nav.teachers", "👳")

render_entity_page(stack, lang, "teachers")
