"""
Dependencias de FastAPI (inyeccion de configuracion y casos de uso).
"""
