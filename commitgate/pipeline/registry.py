"""
Check Registry

Maps check names to their definitions.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from ..config.models import CheckDefinition, PipelineConfig

logger = logging.getLogger(__name__)


class CheckRegistry:
    """
    Read-only lookup of check definitions.

    Populated once at construction; there is no way to register checks
    afterwards.
    """

    def __init__(self, definitions: Iterable[CheckDefinition] = ()):
        self._definitions: Dict[str, CheckDefinition] = {}
        for definition in definitions:
            if definition.name in self._definitions:
                raise ValueError(f"Duplicate check definition: {definition.name}")
            self._definitions[definition.name] = definition

    @classmethod
    def from_config(cls, config: PipelineConfig) -> "CheckRegistry":
        return cls(config.checks.values())

    def resolve(self, name: str) -> Optional[CheckDefinition]:
        """
        Resolve a hook name to an enabled check.

        Returns:
            The definition, or None if the name is unknown or disabled
        """
        definition = self._definitions.get(name)
        if definition is None or not definition.enabled:
            return None
        return definition

    def lookup(self, name: str) -> Optional[CheckDefinition]:
        """Get a definition whether or not it is enabled."""
        return self._definitions.get(name)

    def explain_unresolved(self, name: str) -> str:
        """Why ``resolve`` returned None for a name."""
        definition = self._definitions.get(name)
        if definition is None:
            return f"No check named '{name}' is defined"
        if not definition.enabled:
            return f"Check '{name}' is disabled"
        return f"Check '{name}' is available"

    def names(self) -> List[str]:
        return list(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[CheckDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)
