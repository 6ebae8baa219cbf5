"""Generation pipeline, normalization and storage."""
