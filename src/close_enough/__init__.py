"""
close-enough - Core Package

Fuzzy abbreviation matching for the command line: pick the closest of a set
of candidate strings, or walk a directory tree one abbreviated name at a time.
"""

from .matcher import matches
from .selector import close_enough, closest_each

__version__ = "0.1.0"
__author__ = "close-enough contributors"

__all__ = ['matches', 'close_enough', 'closest_each']
