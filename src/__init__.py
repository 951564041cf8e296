"""
Package marker for the library API source code under `src`.
`src.api` serves HTTP, `src.models` holds the ORM entities, and `src.common` carries settings, logging, and engine helpers.
"""
