"""Seed script for the daily question catalog."""
import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select, func

from app.infra.db.base import Base, build_engine, build_sessionmaker
from app.infra.db.models import QuestionModel
from app.infra.db.repositories.question_repo import QuestionRepositoryImpl
from app.domain.daily_question.models import Question
from app.settings import settings

logger = logging.getLogger(__name__)

# Untagged questions (or theme-only tags) are offered to every relationship type.
QUESTIONS = [
    # Everyone
    ("What made you smile today?", ["light"]),
    ("What is one small thing I do that you love?", ["appreciation"]),
    ("If we could teleport anywhere for the weekend, where would we go?", ["fun"]),
    ("What song reminds you of us?", ["fun"]),
    ("What is something you are proud of this week?", ["light"]),
    ("What is a habit of mine you secretly admire?", ["appreciation"]),
    ("What is your favorite memory of us from this year?", ["memories"]),
    ("What does a perfect lazy Sunday look like to you?", ["fun"]),
    ("What is one thing you want us to try together?", ["future"]),
    ("When did you last feel really understood by me?", ["deep"]),
    ("What is a fear you have never told me about?", ["deep"]),
    ("What makes you feel most loved?", ["deep"]),
    ("Which meal would you want me to cook for you?", ["light"]),
    ("What is a dream you have put on hold?", ["deep"]),
    ("What do you think we are best at as a team?", ["appreciation"]),
    ("What is a compliment you still think about?", ["appreciation"]),
    ("What is the best advice anyone ever gave you?", ["deep"]),
    ("Which childhood memory do you wish I had been there for?", ["memories"]),
    ("What is one place you want us to visit before we turn old?", ["future"]),
    ("What little ritual of ours would you never give up?", ["appreciation"]),
    ("Which movie should we rewatch together?", ["fun"]),
    ("What does home feel like to you?", ["deep"]),
    ("What is one skill you want to learn this year?", ["future"]),
    ("What is the funniest thing that happened to us?", ["memories"]),
    ("What is a snack you could eat every day?", ["light"]),
    ("How do you like to be comforted after a bad day?", ["deep"]),
    ("What is a goal we could work on together?", ["future"]),
    ("What is your favorite way to spend a rainy evening?", ["light"]),
    ("What would your dream job look like?", ["future"]),
    ("Which of your friends would you want me to know better?", ["light"]),
    ("What is a small win from today?", ["light"]),
    ("What did you learn about yourself this month?", ["deep"]),
    ("What photo of us is your favorite and why?", ["memories"]),
    ("What would we name a pet together?", ["fun"]),
    ("What is the kindest thing a stranger has done for you?", ["deep"]),
    ("What are three words you would use to describe us?", ["appreciation"]),
    ("Which season do you like best with me?", ["light"]),
    ("What is something you want to stop worrying about?", ["deep"]),
    ("If we wrote a book together, what would it be about?", ["fun"]),
    ("What would make tomorrow a great day for you?", ["light"]),
    ("What tradition from your family do you want to keep?", ["memories"]),
    ("What is a talent of mine you wish I used more?", ["appreciation"]),
    ("What is your favorite way I say I love you?", ["appreciation"]),
    ("Which trip do you still daydream about?", ["memories"]),
    ("What would your perfect birthday look like?", ["fun"]),
    ("What do you need more of from me lately?", ["deep"]),
    ("What is a book or show that changed how you think?", ["deep"]),
    ("What adventure should we plan next?", ["future"]),
    ("What is a silly argument we had that makes you laugh now?", ["memories"]),
    ("When do you feel most like yourself?", ["deep"]),
    ("What is a dish we should learn to cook together?", ["fun"]),
    ("What is a boundary that matters to you?", ["deep"]),
    ("What is one thing you are looking forward to this week?", ["light"]),
    ("Which song would be the soundtrack of our relationship?", ["fun"]),
    ("What makes you feel calm?", ["light"]),
    ("What is a moment you felt really proud of me?", ["appreciation"]),
    ("What does a good apology look like to you?", ["deep"]),
    ("Which game should we play together this weekend?", ["fun"]),
    ("What is something new you noticed about me recently?", ["appreciation"]),
    ("What would you do with a completely free day?", ["light"]),
    ("What is a risk you are glad you took?", ["deep"]),
    ("Where would you want to live in ten years?", ["future"]),
    ("What small surprise would make your day?", ["fun"]),
    ("What did your younger self imagine love would be like?", ["deep"]),
    ("What are you most grateful for right now?", ["appreciation"]),
    # Dating
    ("What was your first impression of me?", ["dating"]),
    ("What is your idea of a perfect date with me?", ["dating"]),
    ("What made you want to keep seeing me?", ["dating"]),
    ("What is something about me you are still curious about?", ["dating"]),
    ("Where do you see us a year from now?", ["dating", "future"]),
    # Married
    ("What moment from our wedding do you replay most?", ["married"]),
    ("What tradition do you want our home to have?", ["married"]),
    ("How has married life surprised you?", ["married"]),
    ("What chore could I take off your plate this week?", ["married"]),
    ("What would you like our next anniversary to look like?", ["married", "future"]),
    # Long-distance
    ("What is the first thing you want to do when we see each other next?", ["long-distance"]),
    ("What time of day do you miss me most?", ["long-distance"]),
    ("What is a ritual that makes the distance feel smaller?", ["long-distance"]),
    ("What would you show me first in your city?", ["long-distance"]),
    ("Which of our calls do you remember best?", ["long-distance", "memories"]),
]


def _question_id(index: int) -> str:
    return f"q{index:04d}"


async def seed_questions():
    """Seed catalog questions into the database; existing catalogs are left alone."""
    engine = build_engine(settings.database_url, echo=False)
    session_factory = build_sessionmaker(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        result = await session.execute(select(func.count(QuestionModel.id)))
        count = result.scalar()
        if count > 0:
            logger.info("Found %d existing questions. Skipping seed.", count)
            await engine.dispose()
            return

        repo = QuestionRepositoryImpl(session)
        for index, (text, tags) in enumerate(QUESTIONS, start=1):
            await repo.add(Question(id=_question_id(index), text=text, tags=tags))
        logger.info("Seeded %d questions.", len(QUESTIONS))

    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(seed_questions())
