# =============================================================================
# madrasa_core/__init__.py
# Core package for Madrasa Manager
# =============================================================================
"""
Madrasa Manager core package.

Subpackages:
    offline   - local cache, sync queue, connectivity monitor, replay engine
    data      - remote store (Supabase), entity descriptors, repositories
    services  - service results and pandas analytics
    reports   - PDF exports
    i18n      - English / Urdu translations
    auth      - Supabase Auth session helpers
    ui        - Streamlit components shared by the pages
"""

__version__ = "1.0.0"
