"""
CargoDesk - Admin Routes Package

Server-rendered admin pages. Include order matters: fixed paths such as
/admin/login, /admin/profile and /admin/lookup/* are registered before the
generic /admin/{module} record pages.
"""
