"""Typed wrappers for the Cloud Avenue APIs."""