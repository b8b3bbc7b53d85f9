"""
REST API for the calculators.
"""
