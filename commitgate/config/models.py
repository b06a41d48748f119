"""
Pydantic models for configuration validation.

These models define the schema for the pre-commit pipeline: the hook
order, the check table, exclusion rules, reporting and notifications.
"""

from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CheckKind(str, Enum):
    """Execution strategies a check can use."""
    COMMAND = "command"
    PATTERN_SCAN = "pattern_scan"
    COVERAGE = "coverage"
    REFERENCE_VALIDATION = "reference_validation"


class ReportFormat(str, Enum):
    """Supported report layouts."""
    DETAILED = "detailed"
    SUMMARY = "summary"
    JSON = "json"


# ============================================================
# Exclusions and Checks
# ============================================================

class ExclusionRules(BaseModel):
    """Glob rules removing paths and files from consideration."""

    model_config = ConfigDict(frozen=True)

    ignore_paths: List[str] = Field(default_factory=list, description="Path globs (segment or prefix match)")
    ignore_files: List[str] = Field(default_factory=list, description="Basename globs")

    def merged(self, other: Optional["ExclusionRules"]) -> "ExclusionRules":
        """Combine with another rule set, keeping order and dropping duplicates."""
        if other is None:
            return self
        return ExclusionRules(
            ignore_paths=list(dict.fromkeys(self.ignore_paths + other.ignore_paths)),
            ignore_files=list(dict.fromkeys(self.ignore_files + other.ignore_files)),
        )

    @property
    def is_empty(self) -> bool:
        return not self.ignore_paths and not self.ignore_files


class CheckDefinition(BaseModel):
    """
    A single check in the pipeline.

    The kind selects the executor; everything kind-specific lives in
    ``parameters``. Exclusion overrides are typed because the orchestrator
    applies them before any executor sees the file set.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Check name referenced by hooks")
    kind: CheckKind = Field(..., description="Execution strategy")
    enabled: bool = Field(default=True, description="Disabled checks are skipped")
    description: Optional[str] = Field(None, description="Human readable summary")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Kind-specific settings")

    include: List[str] = Field(default_factory=list, description="Only consider files matching these globs")
    exclude_paths: List[str] = Field(default_factory=list, description="Extra path globs to ignore")
    exclude_files: List[str] = Field(default_factory=list, description="Extra basename globs to ignore")
    use_exclusions: bool = Field(default=True, description="Apply the global exclusion rules")
    parallel: Optional[bool] = Field(None, description="Override whether the check may run concurrently")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Check name must not be empty")
        return v.strip()

    @property
    def exclusion_overrides(self) -> ExclusionRules:
        """Per-check rules to merge with the global ones."""
        return ExclusionRules(ignore_paths=self.exclude_paths, ignore_files=self.exclude_files)

    @property
    def parallel_safe(self) -> bool:
        """Whether the check can run beside others without ordering concerns."""
        if self.parallel is not None:
            return self.parallel
        return self.kind in (CheckKind.PATTERN_SCAN, CheckKind.REFERENCE_VALIDATION)


_DEFINITION_FIELDS = set(CheckDefinition.model_fields)


def _infer_kind(parameters: Dict[str, Any]) -> Optional[str]:
    """Guess a check kind from the parameters a flat table carries."""
    if "asset_directory" in parameters:
        return CheckKind.REFERENCE_VALIDATION.value
    if "command" in parameters:
        return CheckKind.COMMAND.value
    if "minimum_coverage" in parameters:
        return CheckKind.COVERAGE.value
    if "patterns" in parameters or "regex" in parameters:
        return CheckKind.PATTERN_SCAN.value
    return None


def _normalize_check(key: str, value: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fold unknown keys of a check table into ``parameters``.

    ``{enabled = true, command = "make"}`` becomes
    ``{name, kind="command", enabled, parameters={"command": "make"}}``.
    """
    typed = {k: v for k, v in value.items() if k in _DEFINITION_FIELDS}
    extra = {k: v for k, v in value.items() if k not in _DEFINITION_FIELDS}

    parameters = dict(typed.get("parameters") or {})
    parameters.update(extra)
    typed["parameters"] = parameters
    typed.setdefault("name", key)

    if "kind" not in typed:
        if "rules" in parameters and "command" not in parameters:
            # patterns here are file globs for a style tool, not text to scan for
            raise ValueError(
                f"Check '{key}' lists style rules but no command; "
                f"set 'kind: command' with a 'command' and put its file globs in 'include'"
            )
        kind = _infer_kind(parameters)
        if kind is None:
            raise ValueError(f"Check '{key}' has no kind and none can be inferred from its settings")
        typed["kind"] = kind

    return typed


# ============================================================
# Reporting and Notifications
# ============================================================

class ReportingConfig(BaseModel):
    """How results are reported and how the run is scheduled."""

    format: ReportFormat = Field(default=ReportFormat.DETAILED, description="Report layout")
    show_warnings: bool = Field(default=True, description="Show check warnings")
    show_suggestions: bool = Field(default=True, description="Show fix suggestions")
    fail_fast: bool = Field(default=False, description="Stop at the first failing check")
    concurrent: bool = Field(default=False, description="Run independent checks in parallel")
    max_workers: int = Field(default=4, description="Worker threads in concurrent mode")

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v


class NotificationConfig(BaseModel):
    """Banner text shown after a run."""

    on_success: str = Field(default="All pre-commit checks passed!")
    on_failure: str = Field(default="Pre-commit checks failed. Please fix the issues before committing.")
    show_duration: bool = Field(default=True)
    show_summary: bool = Field(default=True)


class AgentInfo(BaseModel):
    """Descriptive metadata about the pipeline."""

    name: str = Field(default="pre-commit-check")
    description: Optional[str] = Field(None)
    version: str = Field(default="1.0.0")


class HooksConfig(BaseModel):
    """Ordered hook lists."""

    pre_commit: List[str] = Field(default_factory=list, description="Checks to run, in order")


# ============================================================
# Pipeline Configuration (Main)
# ============================================================

class PipelineConfig(BaseModel):
    """
    Complete pipeline configuration.

    Hooks may reference names absent from ``checks``; the orchestrator
    reports those as skipped instead of rejecting the configuration.
    """

    agent: AgentInfo = Field(default_factory=AgentInfo)
    instructions: Dict[str, str] = Field(default_factory=dict, description="Free-form guidance text")
    hooks: HooksConfig = Field(default_factory=HooksConfig)
    checks: Dict[str, CheckDefinition] = Field(default_factory=dict)
    exclusions: ExclusionRules = Field(default_factory=ExclusionRules)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    @model_validator(mode="before")
    @classmethod
    def normalize_checks(cls, data: Any) -> Any:
        """Accept flat check tables as well as the explicit form."""
        if isinstance(data, dict) and isinstance(data.get("checks"), dict):
            data = {
                **data,
                "checks": {
                    key: _normalize_check(key, value) if isinstance(value, dict) else value
                    for key, value in data["checks"].items()
                },
            }
        return data

    @model_validator(mode="after")
    def validate_check_keys(self):
        """Ensure table keys and check names agree."""
        for key, check in self.checks.items():
            if key != check.name:
                raise ValueError(f"Check '{key}' declares a different name '{check.name}'")
        return self

    @property
    def hook_list(self) -> List[str]:
        return list(self.hooks.pre_commit)

    def unresolved_hooks(self) -> List[str]:
        """Hooks that name an unknown or disabled check."""
        return [
            name for name in self.hooks.pre_commit
            if name not in self.checks or not self.checks[name].enabled
        ]
