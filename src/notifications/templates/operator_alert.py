"""Operator alert template — posted when an order could not be fulfilled."""


class OperatorAlertTemplate:
    message_type = "operator_alert"

    @staticmethod
    def render(context: dict) -> dict:
        email = context.get("email") or "unknown customer"
        message = context.get("message", "unknown error")
        text = f"Fulfillment failed for {email}: {message}"
        return {"subject": "Fulfillment failed", "body": text, "chat_text": text}
