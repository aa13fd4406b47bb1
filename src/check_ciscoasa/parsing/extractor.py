"""Metric extraction from raw device transcripts."""

from typing import Dict, List, Optional

import structlog

from check_ciscoasa.models import MetricCategory, MetricRecord
from check_ciscoasa.parsing.patterns import CATEGORY_PATTERNS

logger = structlog.get_logger(__name__)


class MetricExtractor:
    """Extracts named metric fields from an unstructured transcript.

    The extractor is stateless; every call scans the whole transcript
    with the category pattern. Unmatched optional groups become empty
    strings so every record carries every field of its category.

    Example:
        >>> extractor = MetricExtractor()
        >>> extractor.extract("Cooling Fan 1: 5888 RPM - OK\\n", MetricCategory.COOLING_FAN)
        [{'number': '1', 'rpm': '5888', 'status': 'OK'}]
    """

    def extract(self, transcript: str, category: MetricCategory) -> List[MetricRecord]:
        """Return every record of a category, ordered by position.

        Args:
            transcript: Raw text captured from the device session
            category: Diagnostic line shape to look for

        Returns:
            List of records (empty when nothing matches)
        """
        pattern = CATEGORY_PATTERNS[category]
        records = [m.groupdict(default="") for m in pattern.finditer(transcript)]
        logger.debug("records_extracted", category=category.value, count=len(records))
        return records

    def extract_first(
        self, transcript: str, category: MetricCategory
    ) -> Optional[MetricRecord]:
        """Return the first record of a category, or None."""
        match = CATEGORY_PATTERNS[category].search(transcript)
        if match is None:
            logger.debug("record_not_found", category=category.value)
            return None
        return match.groupdict(default="")

    def extract_all(
        self, transcript: str, *categories: MetricCategory
    ) -> Dict[MetricCategory, List[MetricRecord]]:
        """Extract several categories in one call."""
        return {category: self.extract(transcript, category) for category in categories}
