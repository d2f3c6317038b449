from __future__ import annotations

from typing import Sequence

from .models import ChoiceTally, QuizQuestion, VoteRecord


def tally_choices(
    questions: Sequence[QuizQuestion],
    vote_records: Sequence[VoteRecord],
) -> list[ChoiceTally]:
    """Count left/right picks per this-or-that question."""
    tallies: list[ChoiceTally] = []
    for q in questions:
        left = right = 0
        for record in vote_records:
            answer = record.choices.get(str(q.id))
            if answer == q.left:
                left += 1
            elif answer == q.right:
                right += 1
        tallies.append(ChoiceTally(
            question_id=q.id,
            left=q.left,
            right=q.right,
            dimension=q.dimension,
            left_count=left,
            right_count=right,
            unanswered_count=len(vote_records) - left - right,
        ))
    return tallies


def summarize_choices(tallies: Sequence[ChoiceTally], participant_count: int) -> str:
    if participant_count == 0 or not tallies:
        return "no answers yet."
    people = "1 person" if participant_count == 1 else f"{participant_count} people"
    agreed = sum(
        1 for t in tallies
        if participant_count in (t.left_count, t.right_count)
    )
    return f"{people} answered {len(tallies)} questions and agreed on {agreed}."
