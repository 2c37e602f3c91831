"""
Erros de domínio.

Services levantam estas exceções; o app (main.py) converte para
{"error": <categoria>, "message": <detalhe>} com o status HTTP correspondente.
"""


class AppError(Exception):
    status_code: int = 500
    category: str = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400
    category = "Bad Request"


class ConflictError(AppError):
    # Violação de unicidade. Mantém 400 (não 409) por compatibilidade com os clientes.
    status_code = 400
    category = "Bad Request"


class AuthError(AppError):
    status_code = 401
    category = "Unauthorized"


class AuthzError(AppError):
    status_code = 403
    category = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    category = "Not Found"


class InternalError(AppError):
    status_code = 500
    category = "Internal Server Error"
