"""Domain services layered over the entity stores."""
