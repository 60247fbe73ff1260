"""
db/ - Database Layer
====================
Handles the SQLite database location, schema initialization, and connections.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
