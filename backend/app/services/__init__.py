"""Business logic: restaurant loading, availability engine, reservations and the Zenchef client."""
