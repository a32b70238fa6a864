"""
L3 Detection — read-only probes of the host.

These functions READ system state but never WRITE.
"""
