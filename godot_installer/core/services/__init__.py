"""Pipeline stages and their collaborators."""
