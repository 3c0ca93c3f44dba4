#!/usr/bin/env python3
"""Seed sample categories and trivia questions."""

import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.logging import get_logger, setup_logging
from app.db.base import create_all
from app.db.engine import engine
from app.db.session import SessionLocal
from app.models.question import Category, Difficulty, Question

logger = get_logger(__name__)

SAMPLE_QUESTIONS = [
    {
        "category": "Geography",
        "text": "What is the capital of Brazil?",
        "difficulty": Difficulty.EASY,
        "correct_answer": "Brasília",
        "options": ["São Paulo", "Rio de Janeiro", "Brasília", "Salvador"],
        "explanation": "Brasília has been the federal capital of Brazil since 1960.",
    },
    {
        "category": "Art",
        "text": "Who painted the Mona Lisa?",
        "difficulty": Difficulty.MEDIUM,
        "correct_answer": "Leonardo da Vinci",
        "options": ["Vincent van Gogh", "Pablo Picasso", "Leonardo da Vinci", "Michelangelo"],
        "explanation": "The Mona Lisa was painted by Leonardo da Vinci between 1503 and 1519.",
    },
    {
        "category": "Science",
        "text": "Which chemical element has atomic number 1?",
        "difficulty": Difficulty.HARD,
        "correct_answer": "Hydrogen",
        "options": ["Helium", "Hydrogen", "Lithium", "Beryllium"],
        "explanation": "Hydrogen is the simplest and most abundant element in the universe.",
    },
]


def seed_questions() -> None:
    """Create sample categories and questions, skipping ones that already exist."""
    create_all(engine)
    db = SessionLocal()
    try:
        created = 0
        for item in SAMPLE_QUESTIONS:
            category = db.query(Category).filter(Category.name == item["category"]).first()
            if not category:
                category = Category(name=item["category"])
                db.add(category)
                db.flush()

            exists = db.query(Question).filter(Question.text == item["text"]).first()
            if exists:
                continue

            db.add(
                Question(
                    text=item["text"],
                    options=item["options"],
                    correct_answer=item["correct_answer"],
                    difficulty=item["difficulty"],
                    category_id=category.id,
                    explanation=item["explanation"],
                )
            )
            created += 1

        db.commit()
        logger.info("Seeded questions", extra={"created_count": created})
    except Exception:
        db.rollback()
        logger.error("Seeding failed", exc_info=True)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    seed_questions()
