"""
API Repositories - Data access abstraction layer

Provides a clean interface for data retrieval that can be swapped
between the hosted Supabase database (production) and an in-process
store (development, tests).

Pattern: Repository Pattern
"""
