"""
Default configuration values and templates.

Provides the bundled pre-commit pipeline used by ``commitgate init``.
"""

from typing import Dict, Any


DEFAULT_HOOKS = [
    "compile_check",
    "style_check",
    "security_scan",
    "test_runner",
    "coverage_check",
    "asset_validator",
]


def get_default_checks() -> Dict[str, Any]:
    """Get the default check table."""
    return {
        "compile_check": {
            "kind": "command",
            "enabled": True,
            "description": "Compile all Java sources",
            "include": ["*.java"],
            "parameters": {
                "command": "javac -d out {files}",
                "fail_on_error": True,
                "timeout": 300,
            },
        },
        "style_check": {
            "kind": "command",
            "enabled": True,
            "description": "Run the external style checker on Java sources",
            "include": ["*.java"],
            "parameters": {
                "command": "checkstyle -c style.xml {files}",
                "timeout": 120,
            },
        },
        "security_scan": {
            "kind": "pattern_scan",
            "enabled": True,
            "description": "Look for hardcoded credentials",
            "exclude_paths": [".git", "out", ".idea"],
            "parameters": {
                "patterns": ["password", "api_key", "secret", "token", "credential"],
            },
        },
        "test_runner": {
            "kind": "command",
            "enabled": True,
            "description": "Run the unit test suite",
            "parameters": {
                "command": "java -cp out:lib/* org.junit.runner.JUnitCore",
                "timeout": 600,
            },
        },
        "coverage_check": {
            "kind": "coverage",
            "enabled": True,
            "description": "Keep test coverage above the threshold",
            "use_exclusions": False,
            "parameters": {
                "minimum_coverage": 70,
                "coverage_file": "out/coverage.json",
            },
        },
        "asset_validator": {
            "kind": "reference_validation",
            "enabled": True,
            "description": "Verify referenced game assets exist",
            "include": ["*.java"],
            "parameters": {
                "asset_directory": "res",
                "validate_references": True,
                "check_formats": ["png", "jpg", "wav", "mp3"],
            },
        },
    }


def get_default_exclusions() -> Dict[str, Any]:
    """Get default exclusion rules."""
    return {
        "ignore_paths": [
            ".git/**",
            ".idea/**",
            "out/**",
            "*.class",
            "*.jar",
            ".DS_Store",
            "Thumbs.db",
        ],
        "ignore_files": [
            "module-info.java",
            "*Test.java",
            "*Mock.java",
        ],
    }


def get_default_config() -> Dict[str, Any]:
    """Get the complete default pipeline configuration."""
    return {
        "agent": {
            "name": "pre-commit-check",
            "description": "Automated pre-commit checks",
            "version": "1.0.0",
        },
        "instructions": {
            "general": (
                "All checks must pass before the commit is allowed to proceed. "
                "If any check fails, fix the reported issues and commit again."
            ),
        },
        "hooks": {"pre_commit": list(DEFAULT_HOOKS)},
        "checks": get_default_checks(),
        "exclusions": get_default_exclusions(),
        "reporting": {
            "format": "detailed",
            "show_warnings": True,
            "show_suggestions": True,
            "fail_fast": False,
            "concurrent": False,
            "max_workers": 4,
        },
        "notifications": {
            "on_success": "✅ All pre-commit checks passed!",
            "on_failure": "❌ Pre-commit checks failed. Please fix the issues before committing.",
            "show_duration": True,
            "show_summary": True,
        },
    }
