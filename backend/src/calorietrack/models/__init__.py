from . import artifacts, foods, meals, users, weights  # noqa: F401

__all__ = ["artifacts", "foods", "meals", "users", "weights"]
