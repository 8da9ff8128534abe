"""Submission validation: name policy, repository checks and ownership checks."""
