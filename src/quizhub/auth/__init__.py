"""Authentication and authorization.

Stateless bearer-token auth for two roles:
1. OWNER (quiz authors) → /api/admin/** routes
2. TAKER (participants) → browsing, submitting, history

Request flow: AuthenticationGate (middleware) binds an IdentityContext,
the route policy (router dependency) accepts or rejects it, and handlers
check resource ownership after loading the resource.
"""
