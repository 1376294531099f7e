"""Media Concierge.

A conversational front-end for Radarr and Sonarr: multi-turn requests to
search, download, delete and check on movies and TV series.
"""

__version__ = "0.1.0"
