"""Core kernel primitives: enums, errors, settings, versions, boot."""
