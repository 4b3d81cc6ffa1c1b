"""
campaign_registry: identity registry and name resolution for a Czech-language
tabletop campaign.
"""

__version__ = "0.1.0"
