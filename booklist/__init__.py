"""
Book list mutations with optimistic concurrency control.

This package provides:
- Entry, status and operation models
- The pure list mutator
- Fetch and conditional write stages over a versioned document store
- The service that runs one request through the pipeline
"""
