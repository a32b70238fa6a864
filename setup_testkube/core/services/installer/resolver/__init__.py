"""
L2 Resolver — decides what to install.
"""
