"""Mutation handlers: validate, check ownership, write, then clean up remote media."""
