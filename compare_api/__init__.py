"""Before/after image comparison API backed by Supabase."""

__version__ = "1.0.0"
