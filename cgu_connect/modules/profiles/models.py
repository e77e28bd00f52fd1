# Supabase tables: profiles, auth.users; storage bucket: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id on delete cascade)
- username: text (unique, not null)
- full_name: text (nullable)
- avatar_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

A trigger on auth.users inserts the profiles row on signup, taking the
username from the local part of the email. RLS: everyone authenticated may
select; only auth.uid() = id may update.

Storage bucket `profiles` (public): avatars live at avatars/{user_id}-{random}.{ext}.
Authenticated users may insert objects under avatars/.
"""
