from __future__ import annotations

from recipegen.app.domain.models import DirectRequest, GenerationRequest, IngredientsRequest

INGREDIENT_SEPARATOR = ", "


def original_prompt(request: GenerationRequest) -> str:
    """Text stored with the recipe to show what the user asked for."""
    if isinstance(request, DirectRequest):
        return request.dish_name
    return INGREDIENT_SEPARATOR.join(request.ingredients)


def build_prompt(request: GenerationRequest) -> str:
    if isinstance(request, DirectRequest):
        return _direct_prompt(request)
    return _ingredients_prompt(request)


def _direct_prompt(request: DirectRequest) -> str:
    people = request.servings
    return f"""You are a professional chef and cookbook author. Create a comprehensive, detailed recipe for "{request.dish_name}" that serves exactly {people} people.

Please provide a complete recipe with the following structure:

**Recipe Title**: Give it an appealing, descriptive name

**Description**: Write a 2-3 sentence engaging introduction about the dish - its origins, what makes it special, or when it's best enjoyed.

**Prep Time**: Estimated preparation time
**Cook Time**: Estimated cooking time
**Total Time**: Combined prep and cook time
**Servings**: {people} people
**Difficulty**: Beginner/Intermediate/Advanced

**Ingredients**:
- List ALL ingredients with precise measurements
- Include both metric and imperial measurements where helpful
- Specify brands or types when it matters (e.g., "kosher salt", "extra virgin olive oil")
- Group ingredients by component if it's a complex dish

**Equipment Needed**:
- List essential tools and equipment

**Instructions**:
- Provide detailed, numbered step-by-step instructions
- Include techniques and tips for each step
- Mention visual cues (e.g., "until golden brown", "until bubbling")
- Include temperature guidelines for cooking
- Explain the "why" behind important steps

**Chef's Tips**:
- Include 2-3 professional tips for best results
- Mention common mistakes to avoid
- Suggest ingredient substitutions if applicable

**Serving Suggestions**:
- Recommend accompaniments or side dishes
- Suggest presentation ideas

**Storage & Leftovers**:
- How to store and for how long
- Reheating instructions if applicable

**Nutritional Highlights** (optional):
- Brief mention of key nutritional benefits

Write in a warm, encouraging tone that makes cooking approachable for all skill levels. Use clear, concise language and be specific with quantities, temperatures, and timing."""


def _ingredients_prompt(request: IngredientsRequest) -> str:
    people = request.servings
    ingredients = INGREDIENT_SEPARATOR.join(request.ingredients)
    clauses = _time_limit_clauses(request.time_limit_minutes)

    return f"""You are a creative chef specializing in recipe development. Create an innovative and delicious recipe using these primary ingredients: {ingredients} that serves exactly {people} people.{clauses['constraint']}

Please follow this detailed structure:

**Recipe Title**: Create an appealing name that highlights the main ingredients

**Description**: Write 2-3 sentences explaining what makes this dish special and when it's perfect to enjoy.

**Prep Time**: Estimated preparation time{clauses['stage']}
**Cook Time**: Estimated cooking time{clauses['stage']}
**Total Time**: Combined time{clauses['total']}
**Servings**: {people} people (all ingredient quantities adjusted for this serving size)
**Difficulty**: Rate as Beginner/Intermediate/Advanced

**Complete Ingredients List**:
- Start with the provided ingredients: {ingredients}
- Add complementary ingredients needed to create a complete, balanced dish
- Provide precise measurements for all ingredients scaled for {people} people
- Include both metric and imperial measurements where helpful
- Specify types/brands when important (e.g., "sea salt", "extra virgin olive oil")

**Equipment Needed**:
- List all necessary tools and cookware{clauses['equipment']}

**Step-by-Step Instructions**:
- Provide detailed, numbered cooking steps optimized for {people} servings
- Include preparation techniques and cooking methods{clauses['methods']}
- Mention visual and aromatic cues for each stage
- Give specific temperatures and timing{clauses['timing']}
- Explain important techniques clearly{clauses['techniques']}

**Chef's Professional Tips**:
- Share 2-3 expert tips for optimal results
- Mention potential pitfalls and how to avoid them
- Suggest ingredient alternatives or substitutions

**Serving & Presentation**:
- Recommend how to plate and serve the dish
- Suggest complementary side dishes or drinks

**Storage Instructions**:
- How to properly store leftovers
- Shelf life and reheating guidelines

**Flavor Profile**:
- Describe the taste, texture, and overall eating experience

Be creative while ensuring the recipe is practical and achievable for {people} people{clauses['closing']}. Focus on maximizing the flavors of the provided ingredients while creating a harmonious, complete dish{clauses['dish']}. Write in an encouraging, professional tone suitable for home cooks of all levels."""


def _time_limit_clauses(limit: int | None) -> dict[str, str]:
    """Fragments that pin every timing-related line of the template to `limit`."""
    clauses = {
        "constraint": "",
        "stage": "",
        "total": "",
        "equipment": "",
        "methods": "",
        "timing": "",
        "techniques": "",
        "closing": "",
        "dish": "",
    }
    if not limit:
        return clauses

    clauses.update(
        constraint=f" The total cooking time (prep + cook time) should be approximately {limit} minutes or less.",
        stage=f" (keep within the {limit}-minute total time constraint)",
        total=f" (should not exceed {limit} minutes)",
        equipment=" (prioritize time-efficient equipment if applicable)",
        methods=f" that fit within the {limit}-minute timeframe",
        timing=" (ensure total time stays within limit)",
        techniques=" while maintaining efficiency",
        closing=f" within the {limit}-minute timeframe",
        dish=" that can be prepared efficiently",
    )
    return clauses
