"""FastAPI front-end."""
