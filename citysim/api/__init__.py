"""REST API exposing the city engine to presentation layers."""
