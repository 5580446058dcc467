"""Command-line entry points (silkworm-compile, silkworm-flow)."""
