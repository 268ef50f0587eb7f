"""
NorKyst Reader core: configuration, data types, exceptions and logging.
"""
