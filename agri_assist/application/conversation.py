from typing import List, Tuple


AGRI_SYSTEM_PROMPT = (
    "You are an expert agricultural advisor helping farmers with crop diseases, pests, "
    "nutrient deficiencies and good farming practice. Reply in the language the farmer "
    "writes in, which is usually Urdu. Keep answers simple, practical and easy for a "
    "farmer to follow."
)

MODEL_LOADING_NOTICE = "The assistant model is loading. Please try again in 20-30 seconds.\n\n"


def build_enrichment_request(narrative: str) -> str:
    """Ask a generation model to restate a diagnosis report for the farmer."""
    return (
        "Explain the following crop diagnosis to a farmer in simple, helpful language. "
        "Keep every recommendation and the safety disclaimer.\n\n"
        f"{narrative}"
    )


# (keywords, reply); first rule with any keyword in the lower-cased message wins.
FALLBACK_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("disease", "blight", "بیماری", "بلائٹ"), (
        "To diagnose a crop disease, upload a photo of the affected leaves. "
        "I will identify the disease and suggest a treatment."
    )),
    (("fertilizer", "fertiliser", "nutrient", "کھاد"), (
        "Get a soil test before applying fertiliser. A balance of nitrogen, phosphorus "
        "and potassium is essential for crop health."
    )),
    (("water", "irrigation", "پانی", "آبپاشی"), (
        "Irrigate in the morning so leaves dry quickly. Overwatering can cause root rot; "
        "drip irrigation works best."
    )),
]


class RuleBasedAgriResponder:
    """Canned replies keyed by coarse keyword matching. Never calls out, never fails."""

    def __init__(self, rules: List[Tuple[Tuple[str, ...], str]] | None = None):
        self.rules = FALLBACK_RULES if rules is None else rules

    def respond(self, message: str) -> str:
        lower = message.lower()
        for keywords, reply in self.rules:
            if any(keyword in lower for keyword in keywords):
                return reply
        return (
            f'Your question was received: "{message}"\n\n'
            "For the best diagnosis, upload a photo of your crop. I can quickly identify "
            "diseases, pests or nutrient deficiencies from it."
        )
