"""
Shared utilities: envelopes, errors, validation and logging
"""
