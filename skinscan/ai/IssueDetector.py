from typing import List

from skinscan.models.Response import SkinCondition, SkinIssue

ACNE = "Acne"
WRINKLES = "Wrinkles"
DARK_CIRCLES = "Dark circles"
DARK_SPOTS = "Dark spots/freckles"

# Encounter order matters to the advice block and to clients rendering the list.
ISSUE_RULES = (
    ("acne", 40, ACNE, "Your skin is showing signs of acne."),
    ("wrinkle", 30, WRINKLES, "Your skin is showing signs of aging and wrinkles."),
    ("dark_circle", 30, DARK_CIRCLES, "The skin around your eyes shows dark circles."),
    ("spot", 30, DARK_SPOTS, "Your skin shows freckles or dark spots."),
)


def severity_for(score: int) -> int:
    # Not clamped: scores above 100 yield severities above 10.
    return score // 10


def detect(condition: SkinCondition) -> List[SkinIssue]:
    issues = []
    for field, threshold, name, description in ISSUE_RULES:
        score = getattr(condition, field)
        if score > threshold:
            issues.append(SkinIssue(name=name, description=description, severity=severity_for(score)))
    return issues
