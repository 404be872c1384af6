"""Servicios del Core: ciclo de vida del bundle, IPC, navegación y settings del host."""
