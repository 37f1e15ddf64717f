"""Pure card logic: field model, migration, formatting, normalization and analytics."""
