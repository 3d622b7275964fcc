"""Domain models and errors"""
