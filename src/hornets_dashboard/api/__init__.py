"""Web layer: FastAPI app, routers, auth and dependencies."""
