"""Delivery-ready template — sent when every artifact for an order exists."""

from html import escape


class DeliveryReadyTemplate:
    message_type = "delivery_ready"

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("name") or "friend"
        tier_label = context.get("tier_label", "Lite")
        links = context.get("links", [])
        link_lines = "\n".join(f"- {link['label']}: {link['url']}" for link in links)
        link_items = "".join(
            f'<li><a href="{escape(link["url"])}">{escape(link["label"])}</a></li>' for link in links
        )
        return {
            "subject": f"Your {tier_label} Soul Blueprint is here",
            "body": (
                f"Hi {name},\n\n"
                "Your personalized kit is ready. Everything lives in your folder:\n\n"
                f"{link_lines}\n\n"
                "Reply to this email if anything looks off."
            ),
            "html_body": (
                f"<p>Hi {escape(name)},</p>"
                "<p>Your personalized kit is ready. Everything lives in your folder:</p>"
                f"<ul>{link_items}</ul>"
                "<p>Reply to this email if anything looks off.</p>"
            ),
            "chat_text": f"{name}, your {tier_label} kit is ready:\n{link_lines}",
        }
