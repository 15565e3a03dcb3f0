"""
Entry point for hosts that launch `streamlit run app.py`.

Madrasa Manager's home page lives in Welcome.py; importing it renders the
sign-in screen and dashboard links, while the pages/ directory supplies the
rest of the navigation.
"""

import os
import sys

# Pages import madrasa_core relative to the repository root
sys.path.insert(0, os.path.dirname(__file__))

import Welcome  # noqa: F401,E402
