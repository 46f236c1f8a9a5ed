"""Missing-info template — asks the customer for the fields the order lacks."""

from html import escape


class MissingInfoTemplate:
    message_type = "missing_info"

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name") or "there"
        missing = context.get("missing", [])
        form_url = context.get("form_url", "")
        missing_text = ", ".join(missing) or "a few details"
        return {
            "subject": "Quick follow-up so we can finish your kit",
            "body": (
                f"Hi {name},\n\n"
                f"We're missing {missing_text} to finish your order.\n"
                f"Please fill in the short intake form: {form_url}\n\n"
                "As soon as it comes through we'll finish your kit."
            ),
            "html_body": (
                f"<p>Hi {escape(name)},</p>"
                f"<p>We're missing {escape(missing_text)} to finish your order.</p>"
                f'<p><a href="{escape(form_url)}">Open the intake form</a></p>'
            ),
        }
