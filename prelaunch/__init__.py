"""
Backend for the Sip & Bite "coming soon" page.

A small FastAPI service that collects launch-notification signups and lists
them, backed by an in-memory store or, optionally, any SQLAlchemy database.
"""
