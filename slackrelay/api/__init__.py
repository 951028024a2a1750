"""HTTP routers exposed by the FastAPI application."""
