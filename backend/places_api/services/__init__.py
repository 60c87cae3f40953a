"""
Services Layer

Business logic for users and places that:
- Accept domain inputs (sessions, identities, already-validated fields)
- Return domain outputs (models, tokens)
- Do NOT depend on HTTP request/response objects
- Raise ``places_api.errors`` types for every client-visible failure
"""
