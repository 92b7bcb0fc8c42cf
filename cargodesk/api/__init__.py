"""
CargoDesk - API Package

Backend REST client, tag-invalidated query cache and per-resource request
definitions.
"""
