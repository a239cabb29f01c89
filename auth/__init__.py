"""auth/ -- Authentication and authorization package for TaskDash.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/, team/, or planner/.
api/ imports from auth/, not the other way around.
"""
