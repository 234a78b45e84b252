"""Service layer — the entity registries and the access facade.

Registries raise domain errors; the access facade turns them into
ServiceResult. Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
