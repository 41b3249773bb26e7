from typing import Dict, List

from skinscan.ai.IssueDetector import ACNE, DARK_CIRCLES, DARK_SPOTS, WRINKLES
from skinscan.config import SkinTypeLabels
from skinscan.models.Response import SkinIssue, SkinTypes

BASE_ADVICE: Dict[SkinTypes, List[str]] = {
    SkinTypes.OILY: [
        "Use a gentle, low-pH cleanser made for oily skin.",
        "Avoid oily or greasy products; prefer ones labelled \"oil-free\" or \"non-comedogenic\".",
        "Use a BHA toner to control oil and deep-clean pores.",
        "Moisturize with a light, oil-free gel or lotion.",
    ],
    SkinTypes.DRY: [
        "Use a sulfate-free cream or lotion cleanser.",
        "Add a hydrating serum with hyaluronic acid and ceramides to your routine.",
        "Use a rich, nourishing moisturizer.",
        "Consider a facial oil at night to lock in moisture.",
    ],
    SkinTypes.COMBINATION: [
        "Use a pH-balanced cleanser without harsh sulfates.",
        "Try multi-masking: apply a different mask to each zone of your face.",
        "Use an alcohol-free toner on the whole face.",
        "Use a light moisturizer on the T-zone and a richer one on the cheeks.",
    ],
    SkinTypes.SENSITIVE: [
        "Use an extremely gentle, fragrance-free cleanser.",
        "Avoid products containing alcohol, fragrance and other irritants.",
        "Patch-test new products on a small area before using them on the whole face.",
        "Prefer products with short ingredient lists designed for sensitive skin.",
    ],
}

GENERIC_ADVICE = "Keep a basic skincare routine: cleanse, moisturize and protect from the sun."

ISSUE_ADVICE: Dict[str, List[str]] = {
    ACNE: [
        "Use products with salicylic acid or benzoyl peroxide to reduce acne.",
        "Wash your face twice a day and after heavy sweating.",
    ],
    WRINKLES: [
        "Add retinol or peptides to your evening routine.",
        "Massage gently when applying products to boost circulation.",
    ],
    DARK_CIRCLES: [
        "Use an eye cream with caffeine or vitamin K.",
        "Sleep 7-8 hours a night and stay hydrated.",
    ],
    DARK_SPOTS: [
        "Use a brightening serum with vitamin C or niacinamide.",
        "Wear sunglasses and a wide-brimmed hat outdoors to protect against UV.",
    ],
}

CLOSING_ADVICE = [
    "Drink at least 2 liters of water a day and eat a diet rich in antioxidants.",
    "Apply a broad-spectrum sunscreen every day, even when it is cloudy.",
    "Repeat the skin analysis every few weeks to track your progress.",
    "If your condition gets worse, consult a dermatologist.",
]


class SkinAdvisor:
    def __init__(self, labels: SkinTypeLabels = SkinTypeLabels()):
        self.labels = labels

    def base_advice(self, skin_type_name: str) -> List[str]:
        name = (skin_type_name or "").strip().lower()
        for skin_type, lines in BASE_ADVICE.items():
            if name == self.labels.for_type(skin_type).lower():
                return list(lines)
        return [GENERIC_ADVICE]

    def advise(self, skin_type_name: str, issues: List[SkinIssue]) -> List[str]:
        """
        Base block for the skin type, then per-issue lines in detection order,
        then the closing block. Lines are not deduplicated.
        """
        advice = self.base_advice(skin_type_name)
        for issue in issues:
            advice.extend(ISSUE_ADVICE.get(issue.name, []))
        advice.extend(CLOSING_ADVICE)
        return advice
