"""
API Layer

FastAPI surface over scan sessions and the normalizer.
Imported on demand so the core works without the web stack loaded.
"""
