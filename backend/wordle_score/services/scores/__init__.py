"""Score domain services: cumulative scoring, the record store, backup
codec, restore workflow and remote sync.

HTTP routes and socket handlers import from here; nothing in this package
knows about requests or sockets beyond the SQLAlchemy storage adapter.
"""
