"""Test package for playtype_roles."""
