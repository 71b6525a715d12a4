"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks both counting features use
(settings, DB wiring, logging, errors, fingerprinting). Keep feature-specific
SQL and orchestration in the feature package (`views/`, `reactions/`).
"""
