"""ORM Models — persistence shapes, separate from core board types."""
