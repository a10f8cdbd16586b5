"""Application layer: parameters, pipeline, frame loop, and CLI."""
