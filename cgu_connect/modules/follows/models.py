# Supabase table: follows
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

follows:
- id: uuid (primary key)
- follower_id: uuid (foreign key to profiles.id, not null) - constraint follows_follower_id_fkey
- following_id: uuid (foreign key to profiles.id, not null) - constraint follows_following_id_fkey
- created_at: timestamp (default: now())
- unique constraint on (follower_id, following_id)
- check constraint follower_id <> following_id

The foreign key names matter: follower/following lists embed the profile
through them, e.g. select("profiles!follows_follower_id_fkey(*)").

RLS: authenticated users may select every row; insert and delete only rows
where follower_id = auth.uid().
"""
