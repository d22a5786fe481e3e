from marinecrm.services.template_filler import TemplateFiller, camel_to_snake, format_value, load_templates
from marinecrm.seed.seed_product_descriptions import PRODUCT_DESCRIPTIONS, seed_product_descriptions
from marinecrm import models


class TestTemplateFiller:

    def test_missing_key_returns_none(self):
        assert TemplateFiller({}).fill("ah_pump_rbp_250", {"capacity": 1}) is None
        assert TemplateFiller(None).fill("anything") is None

    def test_exact_key_substitution(self):
        filler = TemplateFiller({"k": "Pump {{model}} @ {{ head }} mwc"})
        assert filler.fill("k", {"model": "RBP-250", "head": 2.5}) == "Pump RBP-250 @ 2.5 mwc"

    def test_camel_case_falls_back_to_snake_case(self):
        filler = TemplateFiller({"k": "{{motorRating}} kW"})
        assert filler.fill("k", {"motor_rating": 30.0}) == "30 kW"

    def test_exact_key_wins_over_snake_case(self):
        filler = TemplateFiller({"k": "{{motorRating}}"})
        assert filler.fill("k", {"motorRating": "exact", "motor_rating": "snake"}) == "exact"

    def test_missing_variable_becomes_empty(self):
        filler = TemplateFiller({"k": "by {{classSociety}}."})
        assert filler.fill("k", {}) == "by ."

    def test_no_escaping(self):
        filler = TemplateFiller({"k": "{{x}}"})
        assert filler.fill("k", {"x": "<b>&</b>"}) == "<b>&</b>"

    def test_fill_or_uses_fallback_on_miss_or_blank(self):
        filler = TemplateFiller({"blank": "{{nothing}}  "})
        assert filler.fill_or("missing", {}, "fallback") == "fallback"
        assert filler.fill_or("blank", {}, "fallback") == "fallback"

    def test_helpers(self):
        assert camel_to_snake("supportPersonnel") == "support_personnel"
        assert camel_to_snake("already_snake") == "already_snake"
        assert format_value(None) == ""
        assert format_value(True) == "yes"
        assert format_value(3.0) == "3"
        assert format_value(2.5) == "2.5"


class TestProductDescriptions:

    def test_seed_is_idempotent_and_loadable(self, db):
        assert seed_product_descriptions(db) == len(PRODUCT_DESCRIPTIONS)
        assert seed_product_descriptions(db) == 0

        templates = load_templates(db)
        assert "ah_starter_vfd" in templates
        assert "{{commissionDays}}" in templates["ah_commissioning"]

    def test_seed_keeps_user_edits_unless_reset(self, db):
        db.add(models.ProductDescription(key="ah_tools_manuals", scope_template="edited"))
        db.commit()

        seed_product_descriptions(db)
        assert load_templates(db)["ah_tools_manuals"] == "edited"

        seed_product_descriptions(db, reset=True)
        assert load_templates(db)["ah_tools_manuals"] != "edited"
