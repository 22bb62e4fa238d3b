"""
Core configuration, storage and errors
"""
