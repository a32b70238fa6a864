"""
L0 Data — static tables and defaults.
"""
