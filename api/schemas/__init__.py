"""
API Schemas - Pydantic models for request/response validation

These schemas define the contract between the API and clients. Every
response is an envelope with a ``success`` flag; rows coming from the
data store are passed through as dicts keyed by column name.
"""
