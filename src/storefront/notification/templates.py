"""Order email templates — plain-text subject and body rendered from a context dict."""


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        lines = [
            f"  {item.get('product_name')} ({item.get('sku')}) x{item.get('quantity')}: "
            f"{item.get('price', 0.0) * item.get('quantity', 0):.2f}"
            for item in context.get("items", [])
        ]
        discount = context.get("discount", 0.0)
        summary = [f"Subtotal: {context.get('subtotal', 0.0):.2f}"]
        if discount > 0:
            summary.append(f"Discount: -{discount:.2f}")
        summary.append(f"Total Amount: {context.get('total_amount', 0.0):.2f}")

        return {
            "subject": f"Order Confirmation - {order_id}",
            "body": (
                "Thank you for your order. We've received it and will process it shortly.\n\n"
                f"Order ID: {order_id}\n"
                "Status: Pending\n\n"
                "Items:\n" + "\n".join(lines) + "\n\n" + "\n".join(summary) + "\n\n"
                "You will receive updates about your order status via email."
            ),
        }


class OrderStatusUpdateTemplate:
    _MESSAGES = {
        "confirmed": "Your order has been confirmed and is being prepared.",
        "shipped": "Your order is on its way.",
        "delivered": "Your order has been delivered. Enjoy!",
        "cancelled": "Your order has been cancelled.",
    }

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        status = context.get("status", "")
        message = OrderStatusUpdateTemplate._MESSAGES.get(status, f"Your order status is now {status}.")
        return {
            "subject": f"Order {status.upper()} - {order_id}",
            "body": (
                f"{message}\n\n"
                f"Order ID: {order_id}\n"
                f"Status: {status}\n"
                f"Total Amount: {context.get('total_amount', 0.0):.2f}"
            ),
        }
