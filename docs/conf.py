import os
import sys

sys.path.insert(0, os.path.abspath(".."))

# Configuration file for the Sphinx documentation builder.
# https://www.sphinx-doc.org/en/master/usage/configuration.html

project = "mcastguard"
copyright = "2026, mcastguard"
author = "mcastguard"
release = "0.1"

autodoc_member_order = "bysource"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx_rtd_theme",
]

exclude_patterns = [
    "_build",
    "Thumbs.db",
    ".DS_Store",
    "**/*_unittest.py",
    "**/*_e2etest.py",
]

html_theme = "sphinx_rtd_theme"
