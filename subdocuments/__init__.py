"""
Sub-documents Module
Each file handles one serialized block embedded in a BODACC record
"""

from .base import PLACEHOLDER, first_text, parse_json_maybe
from .personne import PersonneSection
from .depot import DepotSection
from .modifications import ModificationsSection

__all__ = [
    'PLACEHOLDER',
    'first_text',
    'parse_json_maybe',
    'PersonneSection',
    'DepotSection',
    'ModificationsSection'
]
