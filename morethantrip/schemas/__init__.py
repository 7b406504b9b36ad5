"""
More Than Trip Core — Pydantic Request/Response Schemas
=========================================================

Schemas are separate from the SQLAlchemy models: they define the API
contract (what clients may send, what we return) while the models define
the table layout. Response models use from_attributes so services can pass
ORM objects straight through model_validate.
"""
