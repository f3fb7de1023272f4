"""Core components for the pyvalq validation engine.

This package contains the fundamental building blocks of the engine: the
rule grammar parser, the base class for all rules and the registry that
dispatches to them, the size and message resolvers, the message bag, the
configuration manager, and the validator that orchestrates a pass.
"""
