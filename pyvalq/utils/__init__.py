"""Collaborators the validator consumes at its boundary.

This package contains the translation backend, the presence verifier used
by the ``unique`` and ``exists`` rules, and the file value abstraction.
"""
