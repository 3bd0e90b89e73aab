"""
Package logger. Handlers and CLI commands log through this instance, raise or lower its level to
control verbosity.
"""

import logging

logger = logging.getLogger("alchemist_indexer")
logger.propagate = False
logger.setLevel(logging.INFO)
logger.addHandler(logging.StreamHandler())
