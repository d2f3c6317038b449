"""
Group vote aggregation engine.

Responsibilities:
- Tally five-level verdicts (love / like / meh / unknown / nope) per candidate.
- Boost candidates whose tags match what the group already likes.
- Classify candidates into shared favorites, to-try, best bets and fallback picks.
- Derive per-participant taste profiles.
- Tally this-or-that quiz answers for the binary scheme.
"""
