"""
Configuration loading from environment variables and .env files.
"""
