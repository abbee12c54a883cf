"""Presentational components package.

Scope:
    Pure state-to-HTML render functions for the single-page interface served by
    `pixel_genie.api.http_api`.

Non-goals:
    - No state of its own; every function maps a `GenerationState` (or a field of
      it) to markup.
    - No network access.
"""
