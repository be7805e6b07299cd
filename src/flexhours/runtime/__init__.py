"""Runtime: acquisition controller, pipeline, scheduling and host adapters."""
