"""
CargoDesk - Freight Forwarding Admin

Server-rendered administration site for a freight-forwarding REST backend.
"""

__version__ = "1.0.0"
