"""
bdrss - Opinion Page RSS Feed Generator

Fetches the bdnews24.com opinion page through a FlareSolverr proxy, scrapes
the article teasers and writes them out as an RSS 2.0 feed.
"""

__version__ = "0.1.0"
