from rd_prediction.infrastructure.security.password.password_handler import PasswordHandler

__all__ = ["PasswordHandler"]
