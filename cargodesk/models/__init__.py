"""
CargoDesk - Models Package

This package contains all data models for CargoDesk:
- auth: roles and authentication request models
- api: backend response envelope, canonical list page, search parameters
- forms: validated create/update payloads for every module
- infrastructure: dataclass models for infrastructure components
"""
