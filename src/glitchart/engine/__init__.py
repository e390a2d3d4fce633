"""Pipeline orchestration and seeded determinism."""
