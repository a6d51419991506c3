"""Prompt construction for the recipe generator.

The system instruction fixes the two response modes and their exact JSON
shapes; the user message carries the caller's prompt, the strict flag and a
condensed restatement of the shapes. Both are pure functions of their inputs.
"""

from typing import Dict, List, Tuple

# Ingredients strict mode still allows on top of the caller's list.
PANTRY_STAPLES = (
    "water",
    "salt",
    "pepper",
    "sugar",
    "oil",
    "butter",
    "soy sauce",
    "vinegar",
    "flour",
    "cornstarch",
    "common herbs/spices in small amounts",
)

MAX_LANDING_SECTIONS = 8

SYSTEM_INSTRUCTION = f"""
You are Cook Dobby. You ALWAYS return STRICT JSON (no markdown, no extra text).

Decide MODE from user's prompt:

1) "landing" when the user asks for ideas/options/plural.
   Return:
   {{
     "mode":"landing",
     "intro":"2-4 inviting sentences",
     "sections":[
       {{"title":"UPPERCASE name","teaser":"1-3 sentences","url":"/recipes/<slug>"}}
     ]
   }}
   2-{MAX_LANDING_SECTIONS} sections max.

2) "recipe" for a single dish: when asked for a recipe, random recipe, or when they list ingredients.
   Ingredient rules:
   - If they list ingredients: treat those as the main available items.
   - If strict=true: DO NOT introduce new non-pantry ingredients.
   - Pantry allowed: {", ".join(PANTRY_STAPLES)}.
   - Fill "used_ingredients" from the user's text; put suggestions (not required) under "suggested_additions".
   Return object shape:
   {{
     "mode":"recipe",
     "title":"Dish name",
     "servings": number (optional),
     "time":{{"prep":"...","cook":"...","total":"..."}} (optional),
     "intro":"1-2 sentences (optional)",
     "ingredients":[{{"group":"optional","items":["..."]}}],
     "steps":["Step 1...", "Step 2...", "..."],
     "notes":["optional"],
     "used_ingredients":["..."],
     "suggested_additions":["..."]
   }}

Rules for both modes:
- JSON ONLY. No code fences. No commentary.
- Clear, numbered steps (each entry 1-2 sentences, imperative).
- URLs in landing should be "/recipes/<slugified-title>" if not provided.
""".strip()

JSON_HINT = """
Return ONLY a JSON object with one of these shapes:
{ "mode":"landing", "intro":"...", "sections":[{ "title":"...", "teaser":"...", "url":"..." }] }
OR
{ "mode":"recipe", "title":"...", "ingredients":[{"items":["..."]}], "steps":["..."] }
No markdown. No extra commentary.
""".strip()


def build_user_message(user_prompt: str, strict: bool) -> str:
    return (
        f"User prompt: {user_prompt}\n"
        f"strict={'true' if strict else 'false'}\n\n"
        f"IMPORTANT:\n{JSON_HINT}"
    )


def build_prompt(user_prompt: str, strict: bool = False) -> Tuple[str, str]:
    """Return the ``(system_instruction, user_message)`` pair for a prompt."""
    return SYSTEM_INSTRUCTION, build_user_message(user_prompt, strict)


def build_messages(user_prompt: str, strict: bool = False) -> List[Dict[str, str]]:
    """Chat-completion ``messages`` array for a prompt."""
    system, user = build_prompt(user_prompt, strict)
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]
