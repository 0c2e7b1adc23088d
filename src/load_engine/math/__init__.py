"""Pure training-load math: no I/O, no repositories."""
