"""
Hilfsfunktionen für Tests (Shopify-Antworten und Webhook-Payloads bauen).
"""
import json

import requests


def make_response(status_code: int = 200, body: dict | None = None, link: str | None = None) -> requests.Response:
    """Baut eine echte requests.Response, damit .ok/.json()/.links wie im Betrieb funktionieren."""
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    if link:
        response.headers["Link"] = link
    return response


def order_payload(order_id: int = 1001, line_items: list | None = None, **overrides) -> dict:
    """Minimaler Shopify Order-Webhook"""
    payload = {
        "id": order_id,
        "order_number": 1,
        "email": "order@test.de",
        "financial_status": "paid",
        "customer": {
            "id": 555,
            "first_name": "Max",
            "last_name": "Mustermann",
            "email": "max@test.de",
            "phone": "+49 170 000000"
        },
        "line_items": line_items or [],
    }
    payload.update(overrides)
    return payload


def booking_line_item(
    activity_id,
    booking_date: str = "2024-12-23",
    booking_time: str = "10:00 - 11:00",
    line_id: int = 1,
    extra: dict | None = None
) -> dict:
    """Position mit den Pflicht-Properties einer Buchung, extra = weitere Properties"""
    properties = [
        {"name": "Activity ID", "value": str(activity_id)},
        {"name": "Booking Date", "value": booking_date},
        {"name": "Booking Time", "value": booking_time},
    ]
    for name, value in (extra or {}).items():
        properties.append({"name": name, "value": value})
    return {"id": line_id, "variant_id": 42, "title": "Kajaktour", "quantity": 1, "price": "49.00", "properties": properties}
