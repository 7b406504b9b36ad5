"""
More Than Trip Core — Application Package
===========================================

Backend for a travel-photo-sharing app: photos, regions, trips, tags, users
and likes in PostgreSQL, photo bytes in S3.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← upload orchestration, CRUD
    ├──────────────────┬──────────────────┤
    │  Models/Schemas  │   Blob storage   │  ← SQLAlchemy + Pydantic │ boto3
    ├──────────────────┴──────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
