MESSAGES = {
    "validation": "Пожалуйста, заполните обязательные поля",
    "not_found": "Приглашение не найдено",
    "upstream": "Ошибка сохранения данных. Попробуйте еще раз.",
    "internal": "Ошибка обработки запроса. Попробуйте еще раз.",
    "rsvp_saved": "Ответ отправлен! Спасибо за подтверждение!",
    "invite_created": "Приглашение создано",
}


class HandlerError(Exception):
    status_code = 500
    message_key = "internal"

    @property
    def message(self):
        return MESSAGES[self.message_key]

    def to_dict(self):
        return {"success": False, "error": self.message}


class ValidationFailed(HandlerError):
    status_code = 400
    message_key = "validation"

    def __init__(self, fields):
        super().__init__(f"Missing or invalid fields: {', '.join(fields)}")
        self.fields = list(fields)

    def to_dict(self):
        data = super().to_dict()
        data["fields"] = self.fields
        return data


class InvitationNotFound(HandlerError):
    status_code = 404
    message_key = "not_found"


class UpstreamError(HandlerError):
    """Token exchange or Sheets API failure. The detail is logged, never returned."""

    status_code = 500
    message_key = "upstream"


class ConfigurationError(HandlerError):
    """The deployment is set up in a way the endpoint cannot serve."""

    status_code = 500
    message_key = "internal"
