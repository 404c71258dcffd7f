#!/usr/bin/env python3
"""
Short numeric node identifiers.
"""

from __future__ import annotations

# Standard Library
import logging
import random

# local repo modules
from .errors import IdExhaustedError
from .model import Document, all_ids

logger = logging.getLogger(__name__)

ID_LOW = 1000
ID_HIGH = 9999
MAX_RANDOM_ATTEMPTS = 64

#============================================


def generate_id(
	document: Document | None = None,
	rng: random.Random | None = None,
	low: int = ID_LOW,
	high: int = ID_HIGH,
	max_attempts: int = MAX_RANDOM_ATTEMPTS,
) -> str:
	"""
	Draw a random id not used anywhere in the document.

	Args:
		document: Tree to check for collisions, or None to skip the check.
		rng: Random source, defaults to the module generator.
		low: Smallest id value (inclusive).
		high: Largest id value (inclusive).
		max_attempts: Random draws before switching to picking a free value.

	Returns:
		Identifier string.

	Raises:
		IdExhaustedError: When every value in the range is already used.
	"""
	rng = rng or random.Random()
	if document is None:
		return str(rng.randint(low, high))
	taken = all_ids(document)
	for _attempt in range(max_attempts):
		candidate = str(rng.randint(low, high))
		if candidate not in taken:
			return candidate
	free = [value for value in range(low, high + 1) if str(value) not in taken]
	if not free:
		raise IdExhaustedError(f"All {high - low + 1} node ids are in use.")
	logger.debug("Random id draws collided %d times; picking from %d free ids", max_attempts, len(free))
	return str(rng.choice(free))
