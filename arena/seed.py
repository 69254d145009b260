import logging

from sqlmodel import Session, select

from arena.models import Problem, TestCase

logger = logging.getLogger(__name__)


def seed_problems(session: Session):
    """Create the sample problem when the problem table is empty."""
    if session.exec(select(Problem)).first():
        return

    logger.info("Seeding database with sample problem...")
    problem = Problem(
        title="Two Sum",
        description=(
            "Given an array of integers `nums` and an integer `target`, return indices "
            "of the two numbers such that they add up to `target`."
        ),
        constraints="2 <= nums.length <= 10^4",
        sample_input="2 7 11 15\n9",
        sample_output="0 1",
        marks=25,
    )
    session.add(problem)
    session.commit()
    session.refresh(problem)

    session.add(TestCase(problem_id=problem.id, input="2 7 11 15\n9", expected_output="0 1", is_hidden=False))
    session.add(TestCase(problem_id=problem.id, input="3 2 4\n6", expected_output="1 2", is_hidden=True))
    session.commit()
