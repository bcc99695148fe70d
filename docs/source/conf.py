import os
import sys
sys.path.insert(0, os.path.abspath('../..'))


project = 'Contact Book API'
copyright = '2025, Contact Book developers'
author = 'Contact Book developers'

extensions = ['sphinx.ext.autodoc', 'sphinx.ext.napoleon']

templates_path = ['_templates']
exclude_patterns = []


html_theme = 'alabaster'
html_static_path = ['_static']
