"""
L5 Orchestration — runs the stages in order.
"""
