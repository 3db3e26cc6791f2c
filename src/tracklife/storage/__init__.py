"""Key-value storage backends for tracker collections."""
