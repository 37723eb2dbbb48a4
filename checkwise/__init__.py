"""
Checkwise

Posts and maintains a single checklist comment on a pull request, derived
from glob-based rules, and publishes a commit status once every item is checked.
"""

__version__ = "1.0.0"
__author__ = "Development Team"
__email__ = "dev@example.com"
