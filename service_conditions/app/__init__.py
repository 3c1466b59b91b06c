"""
Application package for the Condition Layout service.
"""
