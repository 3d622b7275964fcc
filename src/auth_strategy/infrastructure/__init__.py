"""Infrastructure adapters (caches)"""
