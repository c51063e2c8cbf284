"""
Normalizes raw scanner findings into IssueRecord objects.

Everything coming back from the scanner is treated as untrusted: missing
fields default to empty strings, severities outside error/warning/notice are
mapped onto the closest tier, and every issue gets a readable type label.
"""
import re
from typing import Any, Dict, Iterable, List, Mapping

from a11ycheck.features.scan.schemas.scan import IssueRecord, IssueSeverity

DEFAULT_ISSUE_TYPE = "Accessibility Issue"
DEFAULT_DESCRIPTION = "No description available"
DEFAULT_RUNNER = "axe"

# axe-core rule ids
RULE_LABELS: Dict[str, str] = {
    "image-alt": "Missing Image Alt Text",
    "input-image-alt": "Missing Image Alt Text",
    "role-img-alt": "Missing Image Alt Text",
    "label": "Missing Form Label",
    "select-name": "Missing Form Label",
    "duplicate-id": "Duplicate Element ID",
    "duplicate-id-active": "Duplicate Element ID",
    "duplicate-id-aria": "Duplicate Element ID",
    "color-contrast": "Insufficient Color Contrast",
    "frame-title": "Missing Iframe Title",
    "heading-order": "Improper Heading Structure",
    "empty-heading": "Improper Heading Structure",
    "th-has-data-cells": "Missing Table Headers",
    "td-headers-attr": "Missing Table Headers",
    "document-title": "Missing Page Title",
    "html-has-lang": "Missing Language Attribute",
    "html-lang-valid": "Missing Language Attribute",
    "meta-refresh": "Meta Refresh Redirect",
    "link-name": "Missing Link Text",
    "button-name": "Missing Button Label",
    "list": "Invalid HTML Structure",
    "listitem": "Invalid HTML Structure",
    "region": "Missing Semantic Structure",
    "landmark-one-main": "Missing Semantic Structure",
}

# HTML_CodeSniffer / WCAG technique codes
TECHNIQUE_LABELS: Dict[str, str] = {
    "H37": "Missing Image Alt Text",
    "H91": "Missing Form Label",
    "F77": "Duplicate Element ID",
    "G18": "Insufficient Color Contrast",
    "H64.1": "Missing Iframe Title",
    "H42": "Improper Heading Structure",
    "F43": "Missing Table Headers",
    "H32.2": "Missing Form Submit Button",
    "SC1_3_1_A": "Missing Semantic Structure",
    "SC2_4_1_A": "Invalid HTML Structure",
    "F68": "Missing Form Labels",
    "H25": "Missing Page Title",
    "H57": "Missing Language Attribute",
    "F40": "Meta Refresh Redirect",
    "H88": "Proper HTML Structure",
}

SEVERITY_ALIASES: Dict[str, IssueSeverity] = {
    "error": IssueSeverity.error,
    "critical": IssueSeverity.error,
    "serious": IssueSeverity.error,
    "warning": IssueSeverity.warning,
    "moderate": IssueSeverity.warning,
    "minor": IssueSeverity.warning,
    "notice": IssueSeverity.notice,
    "info": IssueSeverity.notice,
}

_TECHNIQUE_PATTERN = re.compile(r"\.([A-Z]\d+(?:\.\d+)?)")


def readable_issue_type(code: str) -> str:
    """Turn a rule code such as ``image-alt`` or
    ``WCAG2AA.Principle1.Guideline1_1.1_1_1.H37`` into a label."""
    if not code:
        return DEFAULT_ISSUE_TYPE

    if code in RULE_LABELS:
        return RULE_LABELS[code]

    matches = _TECHNIQUE_PATTERN.findall(code)
    if matches:
        technique = matches[-1]
        # H57.2 falls back to H57
        return TECHNIQUE_LABELS.get(technique) or TECHNIQUE_LABELS.get(
            technique.split(".")[0], DEFAULT_ISSUE_TYPE
        )

    for technique, label in TECHNIQUE_LABELS.items():
        if technique in code:
            return label

    return DEFAULT_ISSUE_TYPE


def normalize_severity(value: Any) -> IssueSeverity:
    if isinstance(value, IssueSeverity):
        return value
    key = str(value or "").strip().lower()
    return SEVERITY_ALIASES.get(key, IssueSeverity.warning)


def _text(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key)
    if value is None:
        return default
    text = str(value)
    return text if text else default


def parse_issue(raw: Mapping[str, Any], position: int) -> IssueRecord:
    code = _text(raw, "code")
    message = _text(raw, "message")
    severity = raw.get("severity") or raw.get("type")

    return IssueRecord(
        id=position,
        type=readable_issue_type(code),
        description=message or DEFAULT_DESCRIPTION,
        severity=normalize_severity(severity),
        selector=_text(raw, "selector"),
        message=message,
        code=code,
        context=_text(raw, "context"),
        runner=_text(raw, "runner", DEFAULT_RUNNER),
    )


def parse_issues(raw_issues: Iterable[Any]) -> List[IssueRecord]:
    """Parse scanner output in order; entries that are not mappings are skipped."""
    issues: List[IssueRecord] = []
    for raw in raw_issues or []:
        if not isinstance(raw, Mapping):
            continue
        issues.append(parse_issue(raw, len(issues) + 1))
    return issues


def count_by_severity(issues: Iterable[Any]) -> Dict[str, int]:
    """Counts per tier. Accepts IssueRecord objects or their dict form."""
    counts = {severity.value: 0 for severity in IssueSeverity}
    for issue in issues:
        raw = issue.severity if isinstance(issue, IssueRecord) else issue.get("severity")
        counts[normalize_severity(raw).value] += 1
    return counts
