"""Server-side actions behind the HTTP routes."""
