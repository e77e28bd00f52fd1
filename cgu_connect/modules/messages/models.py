# Supabase table: messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

messages:
- id: uuid (primary key)
- sender_id: uuid (foreign key to profiles.id, not null)
- receiver_id: uuid (foreign key to profiles.id, not null)
- content: text (not null)
- read: boolean (not null, default: false)
- created_at: timestamp (default: now())
- check constraint sender_id <> receiver_id
- check constraint length(trim(content)) > 0
- index on (sender_id, receiver_id, created_at)

Rows are never deleted; only `read` changes, from false to true, and only by
the receiver. RLS: select where auth.uid() in (sender_id, receiver_id);
insert where sender_id = auth.uid(); update where receiver_id = auth.uid().
"""
