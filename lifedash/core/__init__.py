"""
Core settings, constants, exceptions and dependencies
"""
