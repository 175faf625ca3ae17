"""Static configuration for the University Search Portal API."""
