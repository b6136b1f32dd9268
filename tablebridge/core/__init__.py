"""
Nucleo: configuracion, logging y eventos de la aplicacion.
"""
