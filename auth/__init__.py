"""
auth — User registration and login.

Provides:
  • Password hashing (bcrypt, auto-salted)
  • Photo staging / commit for registration uploads
  • Register / Login API routes with ``{success, message}`` envelopes
  • The error taxonomy mapped onto HTTP status codes
"""
