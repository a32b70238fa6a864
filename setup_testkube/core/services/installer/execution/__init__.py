"""
L4 Execution — everything that writes: downloads, cache, links, subprocesses.
"""
