"""Services Layer — transactional operations over the ORM models.

Invariants:
    - Services own commits and rollbacks; routes never commit
    - Pure rules come from core/, services only apply them to the database

Design Decisions:
    - One service per aggregate: queue, recordings, bulk actions
"""
