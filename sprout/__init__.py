"""
Sprout — build, install and link command-line tools from source repositories.
"""

__version__ = "0.1.0"
