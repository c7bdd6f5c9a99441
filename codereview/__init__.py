"""Code review workflow service — projects, submissions, review decisions, comments."""
