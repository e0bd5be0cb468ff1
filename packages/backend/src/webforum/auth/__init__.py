"""Authentication and authorization.

Learn: Accounts log in with email/password and receive a signed JWT
session token. Protected routes depend on the access gate, which
verifies the bearer token and hands the verified claims to the handler.
Tokens are stateless: no session table, no store lookup per request.
"""
