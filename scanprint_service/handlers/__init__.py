"""
ScanPrint Service Handlers
==========================

Transport handlers for printer types.
"""

from typing import Optional

from .base import BaseHandler
from .cpcl import CPCLHandler

__all__ = ['BaseHandler', 'CPCLHandler', 'get_handler']

# Handler registry
HANDLERS = {
    'cpcl': CPCLHandler,
}


def get_handler(handler_type: Optional[str]) -> Optional[type]:
    """Get handler class by type."""
    return HANDLERS.get(handler_type)
