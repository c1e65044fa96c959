"""
Web interface for the comparable finder.
"""
