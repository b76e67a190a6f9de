"""Demo marketplace data."""

from .scenarios import DemoDataGenerator, seed_demo_data

__all__ = ["DemoDataGenerator", "seed_demo_data"]
