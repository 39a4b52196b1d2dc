"""
Command-line interface for intervaltools.
"""
