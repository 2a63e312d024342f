"""HTTP surface of the coin dashboard: FastAPI app and HTML renderer."""
