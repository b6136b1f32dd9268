"""Integraciones con servicios externos."""
