from typing import List, Tuple

from agri_assist.domain.models import Severity


HEALTHY_MARKER = "healthy"

# (upper bound exclusive, tier); anything at or above the last bound is severe.
SEVERITY_BANDS: List[Tuple[float, Severity]] = [
    (0.4, Severity.MILD),
    (0.7, Severity.MODERATE),
]


def is_healthy_condition(condition: str) -> bool:
    return HEALTHY_MARKER in condition.lower()


def classify_severity(condition: str, confidence: float) -> Severity:
    if is_healthy_condition(condition):
        return Severity.HEALTHY
    for upper_bound, severity in SEVERITY_BANDS:
        if confidence < upper_bound:
            return severity
    return Severity.SEVERE


# Evaluated top to bottom against the lower-cased condition; first match wins.
TREATMENT_RULES: List[Tuple[Tuple[str, ...], List[str]]] = [
    (("blight",), [
        "Apply copper-based fungicide (e.g., Bordeaux mixture) every 7–10 days.",
        "Remove and destroy affected plant parts immediately.",
        "Improve air circulation between plants by pruning.",
        "Avoid overhead watering — use drip irrigation if possible.",
        "Rotate crops next season to break the disease cycle.",
    ]),
    (("rust",), [
        "Apply sulfur-based or triazole fungicide at first sign.",
        "Remove heavily infected leaves and dispose away from the field.",
        "Avoid wetting foliage; water at the base.",
        "Plant rust-resistant varieties in future seasons.",
    ]),
    (("mildew",), [
        "Apply potassium bicarbonate or neem oil spray weekly.",
        "Improve airflow by thinning out dense foliage.",
        "Avoid high-nitrogen fertilisers which promote susceptible growth.",
        "Water in the morning so foliage dries quickly.",
    ]),
    (("bacterial spot", "bacterial"), [
        "Apply copper-based bactericide (copper hydroxide or copper oxychloride).",
        "Remove and destroy heavily infected leaves immediately.",
        "Avoid working with plants when foliage is wet to prevent spread.",
        "Ensure good air circulation — avoid dense planting.",
        "Use disease-free certified seeds for next season.",
        "Avoid overhead irrigation; use drip irrigation instead.",
    ]),
    (("leaf spot", "cercospora", "septoria"), [
        "Apply chlorothalonil or mancozeb fungicide every 7 days.",
        "Remove infected leaves and avoid overhead irrigation.",
        "Ensure adequate plant spacing for air circulation.",
        "Mulch around the base to prevent soil splash onto leaves.",
    ]),
    (("mosaic", "virus", "curl"), [
        "No chemical cure — remove and destroy infected plants immediately.",
        "Control aphid and whitefly vectors with insecticidal soap.",
        "Use reflective mulches to deter virus-transmitting insects.",
        "Sanitise tools between plants to prevent mechanical spread.",
    ]),
    (("scab",), [
        "Apply captan or dodine fungicide preventively.",
        "Prune to open the canopy for better air circulation.",
        "Rake up and destroy fallen leaves which harbour spores.",
        "Choose scab-resistant cultivars for future planting.",
    ]),
    (("rot",), [
        "Improve soil drainage to reduce excess moisture.",
        "Apply appropriate fungicide (e.g., metalaxyl for root rot).",
        "Remove and destroy severely affected plants.",
        "Avoid over-irrigation and ensure proper spacing.",
    ]),
    (("anthracnose",), [
        "Apply mancozeb or azoxystrobin fungicide.",
        "Remove infected fruit and plant debris promptly.",
        "Avoid wetting foliage; water at the base early in the morning.",
        "Ensure proper plant spacing for good air circulation.",
    ]),
]

GENERIC_TREATMENT: List[str] = [
    "Isolate affected plants to prevent spread.",
    "Consult your local agricultural extension office with a sample.",
    "Consider a broad-spectrum fungicide as a precaution.",
    "Monitor remaining plants closely for spread of symptoms.",
    "Document symptoms and progression for agronomist review.",
]


def recommend_treatment(condition: str) -> List[str]:
    text = condition.lower()
    for patterns, actions in TREATMENT_RULES:
        if any(pattern in text for pattern in patterns):
            return list(actions)
    return list(GENERIC_TREATMENT)
