"""Core game engine: board, fleets, attacks, phases and the session facade."""
