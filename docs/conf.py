"""Sphinx configuration."""

import os
import sys
sys.path.insert(0, os.path.abspath('../src'))

from profitability_anonymize import __version__  # noqa: E402

project = 'Profitability Anonymize'
author = 'Profitability Anonymize Developers'
release = __version__

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.doctest',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx_autodoc_typehints',
    'myst_parser',
]

templates_path = ['_templates']
exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

html_theme = 'sphinx_rtd_theme'
html_show_copyright = False

napoleon_google_docstring = False
napoleon_numpy_docstring = True

autodoc_member_order = 'bysource'
autodoc_typehints = 'signature'
typehints_document_rtype = False
typehints_use_signature = True
