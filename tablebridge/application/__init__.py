"""
Capa de aplicación: servicios del pipeline, casos de uso y DTOs.
"""
