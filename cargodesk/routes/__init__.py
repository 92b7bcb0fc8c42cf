"""
CargoDesk - Routes Package

FastAPI routers for the health check and the admin web interface.
"""
