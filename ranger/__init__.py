"""Ranger - scaffold projects from Jinja template trees."""

__version__ = "0.1.0"

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
