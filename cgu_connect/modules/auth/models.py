# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table) and email verification
# - User login and session management
# - Password reset emails
# - JWT token generation and validation

"""
Supabase Auth calls used by AuthService:
- auth.sign_up() - Register new users (institutional domain checked first)
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.admin.sign_out() - Revoke the session behind a JWT
- auth.reset_password_for_email() - Send a password reset link

A `profiles` row is provisioned for every new auth user by a database trigger
on auth.users (see cgu_connect/modules/profiles/models.py).
"""
