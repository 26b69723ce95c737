# Services package init
"""
Notes API — Services Layer
============================

Service Inventory:
    - NoteService: storage accessor for the notes table
"""
