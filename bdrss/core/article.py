"""
Article data model for bdrss.
"""
from dataclasses import dataclass
from typing import Optional

@dataclass
class Article:
    """
    Represents one scraped article teaser.
    """
    title: str
    link: str
    description: str = ""
    image: Optional[str] = None
