"""Domain layer (pure game logic).

- Keep the slot buffer, pattern and session rules here.
- Avoid I/O: no HTTP/FastAPI, no websockets, no scheduler.
- Clock and random source are passed in so the rules stay deterministic under test.
"""
