"""
local-cli: jump into the shell, database or WP-CLI of a Local site.
"""

__version__ = "1.0.0"
__author__ = "local-cli contributors"
