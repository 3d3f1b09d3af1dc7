"""
Manual check against the live Gemini API.

    python scripts/smoke_generate.py "Shakshuka"
    python scripts/smoke_generate.py --ingredients eggs tomatoes feta --time 20
"""
from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import find_dotenv, load_dotenv

from recipegen.app.domain.models import DirectRequest, IngredientsRequest
from recipegen.services.classifier import HeuristicRecipeParser
from recipegen.services.gemini_client import GeminiClient
from recipegen.services.orchestrator import DEFAULT_MODELS, GenerationOrchestrator
from recipegen.services.prompts import build_prompt


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate one recipe with model fallback")
    parser.add_argument("dish", nargs="?", help="dish name for a direct request")
    parser.add_argument("--ingredients", nargs="+", help="ingredients for an ingredients request")
    parser.add_argument("--servings", type=int, default=4)
    parser.add_argument("--time", type=int, default=None, help="time limit in minutes")
    args = parser.parse_args()

    env_path = find_dotenv(usecwd=True)
    if not env_path:
        raise FileNotFoundError(".env not found. Create it at the project root (see .env.example).")
    load_dotenv(dotenv_path=env_path)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    if args.ingredients:
        request = IngredientsRequest(tuple(args.ingredients), args.servings, args.time)
    elif args.dish:
        request = DirectRequest(args.dish, args.servings)
    else:
        parser.error("give a dish name or --ingredients")

    client = GeminiClient(api_key=os.getenv("GEMINI_API_KEY", ""), timeout_seconds=60)
    orchestrator = GenerationOrchestrator(client, models=DEFAULT_MODELS)
    text = orchestrator.generate(build_prompt(request))

    parsed = HeuristicRecipeParser().parse(text, request)
    print(f"title:       {parsed.title}")
    print(f"category:    {parsed.category.value}")
    print(f"ingredients: {', '.join(parsed.ingredients)}")
    print()
    print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
