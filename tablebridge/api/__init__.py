"""
Superficie HTTP (FastAPI) de la sincronizacion continua.
"""
