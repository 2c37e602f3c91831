import bcrypt

from app.errors import ValidationError

MIN_PASSWORD_LENGTH = 6
# Limite do bcrypt (bytes); senhas maiores seriam truncadas silenciosamente.
MAX_PASSWORD_LENGTH = 72


def validate_password_strength(password: str) -> None:
    """
    Valida o tamanho da senha.

    Raises:
        ValidationError: se tiver menos de 6 ou mais de 72 caracteres
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password) > MAX_PASSWORD_LENGTH or len(password.encode("utf-8")) > MAX_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at most {MAX_PASSWORD_LENGTH} characters long")


def hash_password(password: str) -> str:
    """Gera hash bcrypt (12 rounds) para a senha."""
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compara a senha com o hash. Hash malformado conta como senha errada."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False
