"""GUI-agnostic core: archive model, transformations and converter glue."""
