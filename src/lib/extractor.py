"""
Block extractor

Strips the enclosing delimiters of a re-rendered block and repairs each
remaining line through the LineClassifier.
"""

from typing import List, Sequence, Union

from ..models.unit import Snippet
from .classifier import LineClassifier
from .log import LOG


class BlockExtractor:
    """Turns a Snippet into corrected body lines"""

    def __init__(self, classifier: LineClassifier) -> None:
        self.classifier = classifier

    def snippet_extract(self, block: Union[str, Sequence[str], Snippet]) -> List[str]:
        """
        Discard the first and last line, classify the rest in order

        Lines are classified independently; an element of the result may
        hold several lines when a composite form expanded into them.

        Args:
            block: Snippet, raw block text, or its lines

        Returns:
            Corrected body lines

        Raises:
            UnknownFormError: On the first line naming an unregistered form.
                              No partial output is returned.
        """
        snippet = Snippet.from_block(block)
        if snippet.lines:
            LOG(f"Discarding delimiters {snippet.lines[0]!r} / {snippet.lines[-1]!r}", level=3)

        body = snippet.body_get()
        corrected = [self.classifier.line_classify(line) for line in body]
        LOG(f"Extracted {len(corrected)} body lines", level=2)
        return corrected
