"""
biomigrate.validator - SKILL.md Validation
==========================================

Checks a ``SKILL.md`` file against the agent skill format: a YAML
frontmatter block followed by a Markdown body.

Checks Performed
----------------
Errors (validation fails):
    - File missing
    - Frontmatter missing, unterminated, or not a YAML mapping
    - ``name`` missing or not lowercase-hyphenated
    - ``description`` missing or longer than 1024 characters

Warnings:
    - More than 500 lines
    - ``name`` differs from the containing directory
    - ``description`` lacks discovery keywords (when, use, helps, for)
    - ``version`` not semver, ``tags``/``compatibility`` not lists
    - "When to Use" / "When NOT to Use" sections missing

Info:
    - Line count, name, description length, optional metadata, and the
      contents of sibling ``references/`` and ``scripts/`` directories

Usage
-----
>>> from pathlib import Path
>>> from biomigrate.validator import validate_skill
>>> result = validate_skill(Path("skills/my-skill/SKILL.md"))
>>> result.passed
True
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml


MAX_RECOMMENDED_LINES = 500
MAX_DESCRIPTION_LENGTH = 1024

NAME_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+")

DISCOVERY_KEYWORDS: tuple[str, ...] = ("when", "use", "helps", "for")

RECOMMENDED_SECTIONS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("When to Use This Skill", re.compile(r"##\s+When to Use", re.IGNORECASE)),
    ("When NOT to Use This Skill", re.compile(r"##\s+When NOT to Use", re.IGNORECASE)),
)

FRONTMATTER_OPEN = "---\n"
FRONTMATTER_CLOSE = "\n---\n"


class Severity(str, Enum):
    """Severity of a validation finding."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Finding:
    severity: Severity
    message: str


@dataclass
class SkillValidation:
    """
    Result of validating a SKILL.md file.

    Attributes
    ----------
    path : Path
        The validated file.

    findings : list[Finding]
        Everything reported, in the order checks ran.

    metadata : dict[str, Any]
        Parsed frontmatter (empty if it could not be parsed).
    """

    path: Path
    findings: list[Finding] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def _messages(self, severity: Severity) -> list[str]:
        return [f.message for f in self.findings if f.severity == severity]

    @property
    def errors(self) -> list[str]:
        return self._messages(Severity.ERROR)

    @property
    def warnings(self) -> list[str]:
        return self._messages(Severity.WARNING)

    @property
    def info(self) -> list[str]:
        return self._messages(Severity.INFO)

    @property
    def passed(self) -> bool:
        """True when there are no errors. Warnings do not fail validation."""
        return not self.errors

    def add(self, severity: Severity, message: str) -> None:
        self.findings.append(Finding(severity=severity, message=message))


def split_frontmatter(content: str) -> tuple[str, str] | None:
    """
    Split a document into its frontmatter text and body.

    Returns
    -------
    tuple[str, str] | None
        ``(frontmatter, body)``, or None when the document does not start
        with ``---`` or the block is never closed.
    """
    if not content.startswith(FRONTMATTER_OPEN):
        return None

    end = content.find(FRONTMATTER_CLOSE, len(FRONTMATTER_OPEN))
    if end == -1:
        return None

    return content[len(FRONTMATTER_OPEN):end], content[end + len(FRONTMATTER_CLOSE):]


def _list_dir(path: Path) -> list[str]:
    return sorted(p.name for p in path.iterdir())


def _check_name(result: SkillValidation, name: str) -> None:
    if not NAME_PATTERN.match(name):
        result.add(
            Severity.ERROR,
            f'Invalid name format: "{name}". Must be lowercase-hyphenated '
            '(e.g., "my-skill-name")',
        )

    dir_name = result.path.parent.name
    if dir_name and dir_name != name:
        result.add(
            Severity.WARNING,
            f'Skill name "{name}" does not match directory name "{dir_name}"',
        )

    result.add(Severity.INFO, f"Name: {name}")


def _check_description(result: SkillValidation, description: str) -> None:
    length = len(description)
    if length < 1 or length > MAX_DESCRIPTION_LENGTH:
        result.add(
            Severity.ERROR,
            f"Description length ({length}) must be between 1 and "
            f"{MAX_DESCRIPTION_LENGTH} characters",
        )
    result.add(Severity.INFO, f"Description: {length} characters")

    lowered = description.lower()
    if not any(keyword in lowered for keyword in DISCOVERY_KEYWORDS):
        result.add(
            Severity.WARNING,
            "Description should include discovery keywords (when to use this "
            "skill) to help agents find it",
        )


def _check_optional_fields(result: SkillValidation, metadata: dict[str, Any]) -> None:
    version = metadata.get("version")
    if version:
        version = str(version)
        if not VERSION_PATTERN.match(version):
            result.add(
                Severity.WARNING,
                f'Version "{version}" should follow semver format (e.g., 1.0.0)',
            )
        result.add(Severity.INFO, f"Version: {version}")

    if metadata.get("license"):
        result.add(Severity.INFO, f"License: {metadata['license']}")

    if metadata.get("author"):
        result.add(Severity.INFO, f"Author: {metadata['author']}")

    tags = metadata.get("tags")
    if tags:
        if isinstance(tags, list):
            joined = ", ".join(str(t) for t in tags)
            result.add(Severity.INFO, f"Tags: {len(tags)} ({joined})")
        else:
            result.add(Severity.WARNING, "Tags field should be an array")

    compatibility = metadata.get("compatibility")
    if compatibility:
        if isinstance(compatibility, list):
            joined = ", ".join(str(c) for c in compatibility)
            result.add(Severity.INFO, f"Compatibility: {joined}")
        else:
            result.add(Severity.WARNING, "Compatibility field should be an array")


def validate_skill(path: Path) -> SkillValidation:
    """
    Validate a SKILL.md file.

    Parameters
    ----------
    path : Path
        Path to the SKILL.md file.

    Returns
    -------
    SkillValidation
        All findings. Check ``passed`` for the overall verdict.
    """
    result = SkillValidation(path=path)

    if not path.is_file():
        result.add(Severity.ERROR, f"File not found: {path}")
        return result

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        result.add(Severity.ERROR, f"Could not read {path}: {e}")
        return result

    line_count = len(content.split("\n"))
    result.add(Severity.INFO, f"Line count: {line_count}")
    if line_count > MAX_RECOMMENDED_LINES:
        result.add(
            Severity.WARNING,
            f"Line count ({line_count}) exceeds recommended maximum of "
            f"{MAX_RECOMMENDED_LINES} lines. Consider moving detailed content "
            "to references/ directory.",
        )

    if not content.startswith(FRONTMATTER_OPEN):
        result.add(
            Severity.ERROR,
            "SKILL.md must start with YAML frontmatter delimiter (---)",
        )
        return result

    parts = split_frontmatter(content)
    if parts is None:
        result.add(Severity.ERROR, "YAML frontmatter must end with --- delimiter")
        return result
    frontmatter, body = parts

    try:
        metadata = yaml.safe_load(frontmatter) or {}
    except yaml.YAMLError as e:
        result.add(Severity.ERROR, f"YAML frontmatter could not be parsed: {e}")
        return result

    if not isinstance(metadata, dict):
        result.add(Severity.ERROR, "YAML frontmatter must be a mapping of fields")
        return result
    result.metadata = metadata

    name = metadata.get("name")
    if not name:
        result.add(Severity.ERROR, "Required field missing: name")
    else:
        _check_name(result, str(name))

    description = metadata.get("description")
    if not description:
        result.add(Severity.ERROR, "Required field missing: description")
    else:
        _check_description(result, str(description))

    _check_optional_fields(result, metadata)

    for section_name, pattern in RECOMMENDED_SECTIONS:
        if not pattern.search(body):
            result.add(
                Severity.WARNING,
                f'Recommended section missing: "{section_name}"',
            )

    for subdir, label in (("references", "References"), ("scripts", "Scripts")):
        directory = path.parent / subdir
        if directory.is_dir():
            entries = _list_dir(directory)
            result.add(
                Severity.INFO,
                f"{label}: {len(entries)} file(s) ({', '.join(entries)})",
            )

    return result
