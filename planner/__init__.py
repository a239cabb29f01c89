"""planner/ -- Per-user tasks and calendar events.

Layer rule: planner/ imports only stdlib, third-party libraries, and core/.
"""
