import os
import sys

# Sphinx configuration for the domaintensor API reference.
# https://www.sphinx-doc.org/en/master/usage/configuration.html

sys.path.insert(0, os.path.abspath(".."))

project = "domaintensor"
copyright = "2025, domaintensor contributors"
author = "domaintensor contributors"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.mathjax",
    "sphinx.ext.intersphinx",
    "sphinx_math_dollar",
]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable", None),
}

# Tensors, views and expressions read best in the order they are defined
autodoc_member_order = "bysource"
autodoc_default_options = {
    "members": True,
    "special-members": "__getitem__, __setitem__",
    "show-inheritance": True,
}
autosummary_generate = True
napoleon_google_docstring = True
napoleon_use_rtype = False
pygments_style = "sphinx"
templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store", ".venv"]

html_theme = "alabaster"
html_static_path = ["_static"]
