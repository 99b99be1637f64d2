"""auth/ -- Accounts, password hashing, sessions, and bearer-token resolution.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or alerts/.
api/ imports from auth/, not the other way around.
"""
