"""team/ -- Owner-scoped team membership and user directory search.

Layer rule: team/ may import from auth/ and core/. It does NOT import from
api/ or planner/.
"""
