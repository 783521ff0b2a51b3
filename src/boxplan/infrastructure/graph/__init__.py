"""Read-only graph analysis over the containment relation."""
