from agri_assist.application.conversation import (
    FALLBACK_RULES,
    RuleBasedAgriResponder,
    build_enrichment_request,
)


class TestRuleBasedAgriResponder:
    """Test keyword routing of the offline responder."""

    def test_disease_keywords(self):
        responder = RuleBasedAgriResponder()
        assert responder.respond("My crop has a DISEASE") == FALLBACK_RULES[0][1]
        assert responder.respond("گندم میں بیماری") == FALLBACK_RULES[0][1]

    def test_fertilizer_keywords(self):
        assert RuleBasedAgriResponder().respond("Best nutrient mix?") == FALLBACK_RULES[1][1]

    def test_water_keywords(self):
        assert RuleBasedAgriResponder().respond("کتنا پانی دوں؟") == FALLBACK_RULES[2][1]

    def test_first_rule_wins(self):
        assert RuleBasedAgriResponder().respond("disease after irrigation") == FALLBACK_RULES[0][1]

    def test_default_reply_quotes_message(self):
        reply = RuleBasedAgriResponder().respond("When do I harvest maize?")
        assert '"When do I harvest maize?"' in reply
        assert "upload a photo" in reply

    def test_custom_rules(self):
        responder = RuleBasedAgriResponder(rules=[(("locust",), "Contact the plant protection department.")])
        assert responder.respond("Locust swarm!") == "Contact the plant protection department."


def test_enrichment_request_embeds_narrative():
    request = build_enrichment_request("## 🌿 Crop Health Analysis\nLate blight")
    assert request.endswith("## 🌿 Crop Health Analysis\nLate blight")
    assert "farmer" in request
