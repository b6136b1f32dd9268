"""
Migración y sincronización entre una API REST relacional y una base SQL.
"""
