"""Core logic for the comparison API: errors, validation, logging and post use cases."""
