"""HTTP service exposing parse, slide lookup and export."""
