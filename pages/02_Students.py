# =============================================================================
# 02_Students.py - Student register
# =============================================================================
from __future__ import annotations

from madrasa_core.ui import render_entity_page, setup_page

stack, lang = setup_page("nav.students", "👨‍🎓")

render_entity_page(stack, lang, "students", uploads={"photo_url": "student-photos"})
