"""
Configuration layer model for lintkit.

A layer is one unit of configuration contributed by a base, file, default,
ignore, or override source. Layers are validated here and merged later by
the layer sequence.
"""

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator


SEVERITY_NAMES = {"off": 0, "warn": 1, "error": 2}

RuleEntry = Union[int, List[Any]]


def normalize_severity(value: Any) -> int:
    """Convert a rule severity (name or number) to its numeric form"""
    if isinstance(value, bool):
        raise ValueError(f"Invalid rule severity: {value!r}")
    if isinstance(value, int) and value in SEVERITY_NAMES.values():
        return value
    if isinstance(value, str) and value.lower() in SEVERITY_NAMES:
        return SEVERITY_NAMES[value.lower()]
    raise ValueError(
        f"Invalid rule severity: {value!r} (expected one of off, warn, error, 0, 1, 2)"
    )


class ConfigLayer(BaseModel):
    """Single configuration layer with validation"""
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True
    )

    # Identification
    name: Optional[str] = None

    # Matching
    files: Optional[List[str]] = None
    ignores: Optional[List[str]] = None

    # Content
    rules: Dict[str, Any] = Field(default_factory=dict)
    settings: Dict[str, Any] = Field(default_factory=dict)
    language_options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('files', 'ignores')
    @classmethod
    def validate_patterns(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Reject blank glob patterns"""
        if v is None:
            return v
        for pattern in v:
            if not pattern or not pattern.strip():
                raise ValueError('Glob patterns must be non-empty strings')
        return v

    @field_validator('rules')
    @classmethod
    def validate_rules(cls, v: Dict[str, Any]) -> Dict[str, RuleEntry]:
        """Validate rule severities; options may follow the severity in a list"""
        validated: Dict[str, RuleEntry] = {}
        for rule_id, entry in v.items():
            if isinstance(entry, list):
                if not entry:
                    raise ValueError(f'Rule "{rule_id}" must specify a severity')
                validated[rule_id] = [normalize_severity(entry[0]), *entry[1:]]
            else:
                validated[rule_id] = normalize_severity(entry)
        return validated

    @property
    def is_global_ignore(self) -> bool:
        """True when the layer only carries ignore patterns (and maybe a name)"""
        if not self.ignores:
            return False
        return (
            self.files is None
            and not self.rules
            and not self.settings
            and not self.language_options
        )

    def severity_of(self, rule_id: str) -> Optional[int]:
        """Numeric severity configured for a rule in this layer, if any"""
        entry = self.rules.get(rule_id)
        if entry is None:
            return None
        return entry[0] if isinstance(entry, list) else entry
