"""
HTTP read API for HackFlow.
"""
