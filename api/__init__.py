"""FastAPI transport for the Standoff server."""
