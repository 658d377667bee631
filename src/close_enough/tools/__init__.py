"""
Filesystem tools for close-enough.

This package contains the directory lister, the candidate sources for the
plain query mode, the token-driven path resolver and the history store.
"""
