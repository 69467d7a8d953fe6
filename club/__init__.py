"""Members Only message board: data models and admin tooling."""
