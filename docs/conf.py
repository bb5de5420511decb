# Sphinx configuration for the notice-tracker documentation.

import sys
from pathlib import Path

DOCS_DIR = Path(__file__).parent
sys.path.insert(0, str(DOCS_DIR.parent / "src"))

from notice_tracker import __version__  # noqa: E402

project = "Notice Tracker"
copyright = "2026, Notice Tracker Contributors"
author = "Notice Tracker Contributors"
version = ".".join(__version__.split(".")[:2])
release = __version__

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "myst_parser",
    "sphinxcontrib.mermaid",
]

source_suffix = {".md": "markdown"}
root_doc = "index"
exclude_patterns = ["_build"]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "aiohttp": ("https://docs.aiohttp.org/en/stable", None),
}

# Google-style docstrings only
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_use_rtype = False

myst_enable_extensions = ["colon_fence"]
myst_heading_anchors = 3

# Flowcharts in index.md
mermaid_version = "10.9.1"

html_theme = "sphinx_rtd_theme"
html_title = f"Notice Tracker {release}"
html_theme_options = {
    "navigation_depth": 3,
    "collapse_navigation": False,
}

autoclass_content = "class"
autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}
