import logging

logger = logging.getLogger("wikiscan")
