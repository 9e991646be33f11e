# Services package init
"""
Notepad Backend: Services Layer
=================================

What:  Business logic layer sitting between routes (HTTP) and stores (persistence).
How:   Services accept decoded request data, apply business rules, and
       return schema objects. They are stateless and receive the store per call.

Service Inventory:
    - NoteService: list / get / create / update / delete notes
"""
