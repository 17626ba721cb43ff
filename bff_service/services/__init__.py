"""
Backend clients and health aggregation
"""
