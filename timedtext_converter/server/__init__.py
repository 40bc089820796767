"""HTTP API for the Timed-Text Converter (FastAPI app in server.app)."""
