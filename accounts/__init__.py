"""
Accounts module - operator authentication.

This module handles:
- Operator credentials kept in a secret vault
- Sign-in, token renewal, logout and password change
- JWT access/refresh tokens and their revocation
"""
