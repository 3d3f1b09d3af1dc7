from __future__ import annotations

from recipegen.app.domain.models import DirectRequest, IngredientsRequest
from recipegen.services.prompts import build_prompt, original_prompt


class TestDirectPrompt:
    def test_embeds_dish_and_servings(self) -> None:
        prompt = build_prompt(DirectRequest(dish_name="Beef Wellington", servings=6))

        assert '"Beef Wellington"' in prompt
        assert "serves exactly 6 people" in prompt
        assert "**Servings**: 6 people" in prompt

    def test_requests_bold_sections(self) -> None:
        prompt = build_prompt(DirectRequest(dish_name="Paella"))

        for header in ("**Recipe Title**", "**Ingredients**", "**Equipment Needed**",
                       "**Instructions**", "**Chef's Tips**", "**Storage & Leftovers**"):
            assert header in prompt

    def test_is_deterministic(self) -> None:
        request = DirectRequest(dish_name="Paella", servings=2)
        assert build_prompt(request) == build_prompt(request)


class TestIngredientsPrompt:
    def test_joins_ingredients_with_commas(self) -> None:
        prompt = build_prompt(IngredientsRequest(ingredients=("rice", "shrimp", "saffron"), servings=3))

        assert "primary ingredients: rice, shrimp, saffron that serves exactly 3 people." in prompt
        assert "scaled for 3 people" in prompt

    def test_no_time_language_without_limit(self) -> None:
        prompt = build_prompt(IngredientsRequest(ingredients=("rice",)))

        assert "minutes or less" not in prompt
        assert "timeframe" not in prompt

    def test_time_limit_reaches_every_timing_clause(self) -> None:
        prompt = build_prompt(IngredientsRequest(ingredients=("eggs",), time_limit_minutes=25))

        assert "approximately 25 minutes or less" in prompt
        assert prompt.count("(keep within the 25-minute total time constraint)") == 2
        assert "(should not exceed 25 minutes)" in prompt
        assert "that fit within the 25-minute timeframe" in prompt
        assert "achievable for 4 people within the 25-minute timeframe." in prompt
        assert "(prioritize time-efficient equipment if applicable)" in prompt

    def test_is_deterministic(self) -> None:
        request = IngredientsRequest(ingredients=("tofu", "bok choy"), time_limit_minutes=15)
        assert build_prompt(request) == build_prompt(request)


class TestOriginalPrompt:
    def test_direct_uses_dish_name(self) -> None:
        assert original_prompt(DirectRequest(dish_name="Tacos")) == "Tacos"

    def test_ingredients_are_joined(self) -> None:
        assert original_prompt(IngredientsRequest(ingredients=("a", "b"))) == "a, b"
