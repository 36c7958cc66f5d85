"""
Fanaara Discovery - search and ranking engine
"""
