"""
FastAPI RESTful API for the book list service.

This module provides REST endpoints for:
- Adding books to a user's list
- Changing the reading status of a listed book
- Removing books from a user's list
- Reading a user's list
"""
