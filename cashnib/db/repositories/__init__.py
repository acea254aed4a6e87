"""
Per-domain repository modules for database access.

Every function takes the request `Session` first and scopes reads and writes
to the owning user, so a document belonging to someone else behaves exactly
like a missing one.
"""
