"""
StoreIt backend package.

A FastAPI service for one-time-password sign-in and per-user file storage,
with all state kept in an Appwrite project.
"""
