# latex_renderer/latex/placeholder_store.py

import logging
import re
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Set

from ..models.types import EnvironmentRecord, ProcessingError


# Private-use code points keep tokens clear of user text and of every
# LaTeX/HTML pattern applied while they are in place.
TOKEN_PREFIX = "\ue000ENV"
TOKEN_SUFFIX = "\ue001"
TOKEN_PATTERN = re.compile(re.escape(TOKEN_PREFIX) + r'(\d+)' + re.escape(TOKEN_SUFFIX))

Resolver = Callable[[EnvironmentRecord], str]


class PlaceholderStore:
    """
    Bijective mapping between placeholder tokens and extracted environments.

    One store is owned by exactly one transformation pass; its counter is
    never shared between passes.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._records: Dict[str, EnvironmentRecord] = {}
        self._resolved: Set[str] = set()
        self._counter = 0

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, token: object) -> bool:
        return token in self._records

    def reserve(self, record: EnvironmentRecord) -> EnvironmentRecord:
        """
        Allocate a fresh token for an environment and record the mapping.

        Returns:
            The record with its token filled in
        """
        token = f"{TOKEN_PREFIX}{self._counter}{TOKEN_SUFFIX}"
        self._counter += 1
        record = replace(record, token=token)
        self._records[token] = record
        self.logger.debug(f"Reserved token #{self._counter - 1} for environment '{record.name}'")
        return record

    def resolve(self, token: str) -> EnvironmentRecord:
        """Return the environment behind a token and mark the token as used."""
        record = self._records.get(token)
        if record is None:
            raise ProcessingError(
                error_type="placeholder_resolution",
                message=f"Unknown placeholder token {token!r}",
                context=token
            )
        self._resolved.add(token)
        return record

    def find_tokens(self, text: str) -> List[str]:
        """All token-shaped substrings in text, in order of appearance."""
        return [match.group(0) for match in TOKEN_PATTERN.finditer(text)]

    def outstanding(self) -> List[EnvironmentRecord]:
        """Environments that were reserved but never substituted."""
        return [record for token, record in self._records.items() if token not in self._resolved]

    def substitute_all(self, text: str, resolver: Optional[Resolver] = None) -> str:
        """
        Replace every token in text with its resolved content.

        Args:
            text: Text possibly containing tokens
            resolver: Turns a record into replacement text; defaults to the
                environment's original source

        Returns:
            Text with no tokens left

        Raises:
            ProcessingError: If a token-shaped string has no record
        """
        resolve_record = resolver or (lambda record: record.source)

        def substitute(match: 're.Match[str]') -> str:
            token = match.group(0)
            if token not in self._records:
                start = max(match.start() - 40, 0)
                raise ProcessingError(
                    error_type="placeholder_resolution",
                    message=f"Unresolvable placeholder token {token!r}",
                    context=text[start:match.end() + 40]
                )
            return resolve_record(self.resolve(token))

        return TOKEN_PATTERN.sub(substitute, text)

    def assert_resolved(self, text: str, context: str = "") -> None:
        """Fail loudly when a token survived into output."""
        leftover = self.find_tokens(text)
        if leftover:
            names = [self._records[token].name for token in leftover if token in self._records]
            raise ProcessingError(
                error_type="placeholder_resolution",
                message=f"{len(leftover)} placeholder token(s) left unresolved: {names or leftover}",
                context=context or text,
                element_id=leftover[0]
            )
