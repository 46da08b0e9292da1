"""
Catalog service: restaurant catalog commands served over a Redis Streams
command bus.
"""
