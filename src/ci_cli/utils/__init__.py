"""Shared utilities: timestamp and text helpers.

Rules
-----
* No business logic.
* No I/O.
* Importable by any layer.
"""
