"""
HTTP API for gzplan.

Modules:
    main: FastAPI application
    schemas: Pydantic request/response schemas
    routes: Endpoint routers (plans, loans)
"""
