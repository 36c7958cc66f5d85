"""
API and filter models for Fanaara Discovery
"""
