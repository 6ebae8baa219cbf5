"""FastAPI web interface."""
