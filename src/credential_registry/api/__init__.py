"""HTTP boundary - FastAPI application and routes."""
