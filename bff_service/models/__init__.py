"""
Pydantic models for the BFF gateway
"""
