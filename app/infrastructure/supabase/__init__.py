"""
Supabase adapters.

Thin httpx clients for the Supabase REST (PostgREST) and Auth (GoTrue)
APIs, implementing the bookmark store and identity provider ports.
"""
