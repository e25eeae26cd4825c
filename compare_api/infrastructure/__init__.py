"""Infrastructure layer for the comparison API.

Supabase gateways (auth, database, storage), rate limiting and health checks.
"""
