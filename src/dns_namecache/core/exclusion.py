"""
No-Caching Registry

Decides whether a resolved host name must be kept out of the positive cache.
Names that matched a pattern are remembered; names that did not match are
checked again on every call, so patterns added later still apply to them.
"""

import logging
import re
import threading
from typing import Iterable, List, Optional, Pattern, Set, Union

logger = logging.getLogger(__name__)


class NoCachingRegistry:
    """Ordered exclusion patterns with memoized matches"""

    def __init__(self, patterns: Optional[Iterable[Union[str, Pattern]]] = None):
        self._patterns: List[Pattern] = []
        self._excluded_hosts: Set[str] = set()
        self._lock = threading.Lock()

        for pattern in patterns or []:
            self.add_pattern(pattern)

    @property
    def patterns(self) -> List[str]:
        with self._lock:
            return [pattern.pattern for pattern in self._patterns]

    def add_pattern(self, pattern: Union[str, Pattern]) -> None:
        """Append an exclusion pattern

        Raises:
            re.error: If the pattern does not compile
        """
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        with self._lock:
            self._patterns.append(compiled)
        logger.debug(f"Added no-caching pattern {compiled.pattern!r}")

    def is_excluded(self, resolved_name: str) -> bool:
        """Check a resolved host name against the exclusion patterns"""
        with self._lock:
            if resolved_name in self._excluded_hosts:
                return True
            patterns = list(self._patterns)

        for pattern in patterns:
            if pattern.fullmatch(resolved_name):
                with self._lock:
                    self._excluded_hosts.add(resolved_name)
                logger.debug(
                    f"Host {resolved_name} excluded from caching by {pattern.pattern!r}"
                )
                return True

        return False

    def excluded_count(self) -> int:
        with self._lock:
            return len(self._excluded_hosts)

    def excluded_hosts(self) -> List[str]:
        with self._lock:
            return sorted(self._excluded_hosts)
