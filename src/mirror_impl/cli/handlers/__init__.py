"""
Command handlers for the mirror-impl CLI.
"""
