"""Web adapter — FastAPI routes for parsing and applying actions."""
