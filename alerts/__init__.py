"""alerts/ -- Owner-scoped persistence for user alerts.

Layer rule: alerts/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or auth/. Owner ids arrive as plain ints.
"""
