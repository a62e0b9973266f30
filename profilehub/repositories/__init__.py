from profilehub.repositories.users import UserRepository

__all__ = ["UserRepository"]
