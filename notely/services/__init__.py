"""
Notely Backend: Services Layer
==============================

Service Inventory:
    - UserService: user creation and lookup by API key
    - DatabaseIdentityResolver: the Auth Guard's identity store
    - NoteService: per-user note creation and listing
"""
