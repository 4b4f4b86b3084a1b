"""Decision core: suggestions, wave targets, logic gates and autopilot status."""
