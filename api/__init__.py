"""FastAPI service for the Contact Dashboard."""
