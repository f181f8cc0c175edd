"""HTTP API for the browser client."""
