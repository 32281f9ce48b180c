"""
Clients for the hosted backend.
"""

from .supabase_client import SupabaseClient, APIResponse

__all__ = ["SupabaseClient", "APIResponse"]
