"""Domain layer (pure logic).

- Keep bingo rules and payout calculations here.
- Avoid I/O: no sockets, no FastAPI, no scheduler.
- Prefer deterministic functions (the random generator is passed in as an argument).
"""
