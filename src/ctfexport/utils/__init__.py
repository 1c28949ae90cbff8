"""Internal helpers for ctfexport."""
