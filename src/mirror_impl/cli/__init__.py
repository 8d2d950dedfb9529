"""
Command Line Interface for mirror-impl.
"""
