"""
multitranslate - concurrent multi-provider translation dispatch
"""
__version__ = "1.0.0"
