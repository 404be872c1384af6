"""Core: dominio, configuración, logging y servicios (sin I/O directo)."""
