"""
HackFlow: hackathon announcements aggregated from Telegram channels and the web.
"""

__version__ = "1.0.0"
