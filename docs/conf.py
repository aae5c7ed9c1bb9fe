# Sphinx configuration for the pendulab API reference.

import os
import sys

sys.path.insert(0, os.path.abspath(".."))

from pendulab import __version__  # noqa: E402

project = "pendulab"
author = "pendulab contributors"
copyright = "2025, pendulab contributors"
release = __version__
version = ".".join(__version__.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.mathjax",
    "sphinx.ext.intersphinx",
]

master_doc = "index"
exclude_patterns = ["_build"]

# pip install pendulab[docs] for the RTD theme
try:
    import sphinx_rtd_theme  # noqa: F401
    html_theme = "sphinx_rtd_theme"
except ImportError:
    html_theme = "alabaster"
html_title = f"pendulab {release}"

# The plot helpers import matplotlib lazily; mock it so autodoc works without the extra.
autodoc_mock_imports = ["matplotlib"]
autodoc_typehints = "description"
autodoc_member_order = "bysource"
autodoc_default_options = {"members": True, "show-inheritance": True}
autosummary_generate = False

# Docstrings mix Google sections (Args/Returns/Raises) and plain prose.
napoleon_google_docstring = True
napoleon_numpy_docstring = False

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable/", None),
}
