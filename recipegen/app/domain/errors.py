from __future__ import annotations


class RecipeAppError(Exception):
    pass


class RecipeNotFoundError(RecipeAppError):
    def __init__(self, recipe_id: str):
        super().__init__("Recipe not found")
        self.recipe_id = recipe_id


class UserNotFoundError(RecipeAppError):
    def __init__(self, user_id: str):
        super().__init__("User not found")
        self.user_id = user_id


class AuthenticationError(RecipeAppError):
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class EmailAlreadyRegisteredError(RecipeAppError):
    def __init__(self, email: str):
        super().__init__("User with this email already exists")
        self.email = email


class InvalidProfilePictureError(RecipeAppError):
    pass


class RepositoryError(RecipeAppError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
