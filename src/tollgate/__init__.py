"""Tollgate application layer.

Wires the token engine to application settings and exposes the
operator CLI.
"""
