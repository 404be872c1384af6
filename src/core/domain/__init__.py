"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (Pydantic v2), errores y helpers
  de texto del bundle.
- El dominio no conoce HTTP, CLI, ni Electron: solo conceptos del problema.
"""
