"""
Voting session lifecycle.

Responsibilities:
- Create sessions and register participants.
- Move sessions through lobby -> collecting -> complete.
- Trigger aggregation on full completion, early close and late-joiner votes.
- Ask the suggestion service for fresh ideas when nothing works for the group.
- Keep a per-session notification log for clients to poll.
"""
